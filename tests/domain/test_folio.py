"""Unit tests for folio generation."""

import re
from datetime import datetime, timezone

from greenhaul.domain.service.folio import FolioGenerator


def test_format():
    folios = FolioGenerator(
        clock=lambda: datetime(2025, 3, 1, 9, 5, 7, tzinfo=timezone.utc),
        suffix=lambda: "A1B2C3",
    )
    assert folios.next() == "GH-20250301-090507-A1B2C3"


def test_default_suffix_is_six_uppercase_hex_chars():
    folio = FolioGenerator().next()
    assert re.fullmatch(r"GH-\d{8}-\d{6}-[0-9A-F]{6}", folio)


def test_consecutive_folios_differ():
    folios = FolioGenerator()
    assert len({folios.next() for _ in range(20)}) == 20
