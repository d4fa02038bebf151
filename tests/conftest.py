from __future__ import annotations

from collections.abc import Callable

import pytest

from omnifind.divination import compute
from omnifind.models import Direction, DivinationInput, HistoryItem


@pytest.fixture
def keys_query() -> DivinationInput:
    return DivinationInput(
        item_name="keys",
        lost_location="Office",
        direction=Direction.CENTER,
        lost_time="2024-06-15T10:00",
    )


@pytest.fixture
def make_item() -> Callable[[int], HistoryItem]:
    """Build a distinct HistoryItem whose id/timestamp is `n`."""

    def _make(n: int) -> HistoryItem:
        query = DivinationInput(
            item_name=f"item-{n}",
            lost_location="地铁站",
            direction=Direction.NORTH,
            lost_time="2024-01-05T08:30",
        )
        return HistoryItem.create(query, compute(query, "en"), timestamp=n)

    return _make
