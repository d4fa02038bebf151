"""Tests for the Streamlit render helpers, with `st` swapped for a recorder."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from omnifind import app
from omnifind.divination import compute
from omnifind.models import Direction, DivinationInput, HistoryItem


class _RecordingStreamlit:
    """Stands in for the streamlit module; records every element call."""

    def __init__(self, **state) -> None:
        self.session_state = SimpleNamespace(**state)
        self.calls: list[tuple[str, tuple]] = []
        self.sidebar = self

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> bool:
        return False

    def expander(self, *args, **kwargs):
        return self

    def button(self, *args, **kwargs) -> bool:
        return False

    def __getattr__(self, name: str):
        def record(*args, **kwargs) -> None:
            self.calls.append((name, args))

        return record

    def bodies(self, element: str) -> list[str]:
        return [str(args[0]) for name, args in self.calls if name == element and args]


@pytest.fixture
def markdown_item() -> HistoryItem:
    query = DivinationInput("*keys*", "Park", Direction.CENTER, "2024-06-15T10:00")
    return HistoryItem.create(query, compute(query, "en"), timestamp=1)


class TestSummaryRendering:
    def test_result_view_shows_summary_as_plain_text(self, monkeypatch, markdown_item):
        fake = _RecordingStreamlit(result=markdown_item.result)
        monkeypatch.setattr(app, "st", fake)

        app._render_result("en")

        assert markdown_item.result.summary_en in fake.bodies("text")
        assert not any("*keys*" in body for body in fake.bodies("markdown"))

    def test_history_view_shows_summary_as_plain_text(self, monkeypatch, markdown_item):
        fake = _RecordingStreamlit(history=[markdown_item])
        monkeypatch.setattr(app, "st", fake)

        app._render_history("en", store=None)

        assert markdown_item.result.summary_en in fake.bodies("text")
        assert not any("*keys*" in body for body in fake.bodies("markdown"))
