"""Domain service: Slot Capacity Checker.

Every calendar day accepts a fixed number of deliveries and, separately,
of pickups. Orders count against the day whatever their status. This is
independent of inventory: stock can be free while the day is full, and
the other way round.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from greenhaul.domain.exceptions import SlotFullError, ValidationError
from greenhaul.domain.model.value_objects import DateRange
from greenhaul.domain.repository.order_repository import OrderRepository

DAILY_SLOT_CAP = 3
MAX_CALENDAR_DAYS = 92


class SlotKind(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


@dataclass(frozen=True)
class CalendarDay:
    day: date
    deliveries: int
    pickups: int
    deliveries_available: int
    pickups_available: int


class SlotCapacityChecker:

    def __init__(self, order_repo: OrderRepository, daily_cap: int = DAILY_SLOT_CAP) -> None:
        if daily_cap < 0:
            raise ValidationError("Daily slot cap cannot be negative")
        self._order_repo = order_repo
        self._daily_cap = daily_cap

    @property
    def daily_cap(self) -> int:
        return self._daily_cap

    def booked(self, day: date, kind: SlotKind) -> int:
        if kind is SlotKind.DELIVERY:
            return self._order_repo.count_deliveries_on(day)
        return self._order_repo.count_pickups_on(day)

    def has_capacity(self, day: date, kind: SlotKind) -> bool:
        return self.booked(day, kind) < self._daily_cap

    def ensure_capacity(self, day: date, kind: SlotKind) -> None:
        if not self.has_capacity(day, kind):
            raise SlotFullError(day, kind.value, self._daily_cap)

    def calendar(self, date_start: date, date_end: date) -> list[CalendarDay]:
        """Per-day slot usage for an inclusive range. Read-only."""
        period = DateRange(date_start, date_end)
        if (period.end - period.start).days + 1 > MAX_CALENDAR_DAYS:
            raise ValidationError(
                f"Calendar range is limited to {MAX_CALENDAR_DAYS} days"
            )
        days: list[CalendarDay] = []
        for day in period.days():
            deliveries = self._order_repo.count_deliveries_on(day)
            pickups = self._order_repo.count_pickups_on(day)
            days.append(
                CalendarDay(
                    day=day,
                    deliveries=deliveries,
                    pickups=pickups,
                    deliveries_available=max(self._daily_cap - deliveries, 0),
                    pickups_available=max(self._daily_cap - pickups, 0),
                )
            )
        return days
