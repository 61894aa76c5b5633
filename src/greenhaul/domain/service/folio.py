"""Folio generation.

A folio is the human-readable order identifier shown to customers in
place of the numeric id: ``GH-YYYYMMDD-HHMMSS-XXXXXX``. The timestamp is
UTC and the suffix is random, so collisions are possible but rare; the
order repository turns one into DuplicateFolioError.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Callable

FOLIO_PREFIX = "GH"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_suffix() -> str:
    return secrets.token_hex(3).upper()


class FolioGenerator:

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        suffix: Callable[[], str] = _random_suffix,
    ) -> None:
        self._clock = clock
        self._suffix = suffix

    def next(self) -> str:
        stamp = self._clock().strftime("%Y%m%d-%H%M%S")
        return f"{FOLIO_PREFIX}-{stamp}-{self._suffix()}"
