"""Application service: Show Calendar use case (query)."""

from __future__ import annotations

from datetime import date

from greenhaul.application.dto import CalendarDayDTO
from greenhaul.domain.repository.unit_of_work import UnitOfWork
from greenhaul.domain.service.slot_capacity_checker import (
    DAILY_SLOT_CAP,
    SlotCapacityChecker,
)


class ShowCalendarHandler:

    def __init__(self, uow: UnitOfWork, daily_slot_cap: int = DAILY_SLOT_CAP) -> None:
        self._uow = uow
        self._daily_slot_cap = daily_slot_cap

    def handle(self, date_start: date, date_end: date) -> list[CalendarDayDTO]:
        with self._uow:
            checker = SlotCapacityChecker(self._uow.orders, self._daily_slot_cap)
            days = checker.calendar(date_start, date_end)
        return [
            CalendarDayDTO(
                date=d.day.isoformat(),
                deliveries=d.deliveries,
                pickups=d.pickups,
                deliveries_available=d.deliveries_available,
                pickups_available=d.pickups_available,
            )
            for d in days
        ]
