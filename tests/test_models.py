"""Tests for data models, config loading, and translations."""

from __future__ import annotations

from pathlib import Path

from omnifind.config import DEFAULT_HISTORY_PATH, StoreConfig, load_config
from omnifind.divination import compute
from omnifind.i18n import t
from omnifind.models import Direction, DivinationInput, DivinationResult, HistoryItem


class TestDirection:
    def test_coerce_known(self):
        assert Direction.coerce("NORTHEAST") is Direction.NORTHEAST
        assert Direction.coerce(Direction.WEST) is Direction.WEST

    def test_coerce_unknown_is_center(self):
        assert Direction.coerce("UP") is Direction.CENTER
        assert Direction.coerce(None) is Direction.CENTER

    def test_nine_values(self):
        assert len(list(Direction)) == 9


class TestHistoryItem:
    def test_create_uses_time_based_id(self, keys_query):
        item = HistoryItem.create(keys_query, compute(keys_query), timestamp=1718445600000)
        assert item.id == "1718445600000"
        assert item.timestamp == 1718445600000

    def test_create_stamps_wall_clock(self, keys_query):
        item = HistoryItem.create(keys_query, compute(keys_query))
        assert item.id == str(item.timestamp)
        assert item.timestamp > 1_600_000_000_000

    def test_dict_layout(self, keys_query):
        data = HistoryItem.create(keys_query, compute(keys_query, "en"), timestamp=1).to_dict()
        assert set(data) == {"id", "timestamp", "input", "result"}
        assert data["input"] == {
            "itemName": "keys",
            "lostLocation": "Office",
            "direction": "CENTER",
            "lostTime": "2024-06-15T10:00",
        }
        assert data["result"]["probability"] == 45
        assert data["result"]["lang"] == "en"

    def test_from_dict_restores_item(self, keys_query):
        item = HistoryItem.create(keys_query, compute(keys_query), timestamp=1)
        assert HistoryItem.from_dict(item.to_dict()) == item

    def test_result_without_lang_defaults_to_zh(self, keys_query):
        data = compute(keys_query, "en").to_dict()
        del data["lang"]
        assert DivinationResult.from_dict(data).lang == "zh"

    def test_input_from_dict_defaults(self):
        query = DivinationInput.from_dict({"itemName": "伞"})
        assert query.direction is Direction.CENTER
        assert query.lost_location == ""

    def test_result_text_by_language(self, keys_query):
        result = compute(keys_query)
        assert result.text("summary", "zh") == result.summary
        assert result.text("summary", "en") == result.summary_en


class TestConfig:
    def test_empty_environment_is_local_only(self):
        config = load_config({})
        assert not config.remote_enabled
        assert config.history_path == DEFAULT_HISTORY_PATH

    def test_remote_needs_both_values(self):
        assert not load_config({"SUPABASE_URL": "https://x.supabase.co"}).remote_enabled
        assert not load_config({"SUPABASE_KEY": "k"}).remote_enabled
        assert load_config({"SUPABASE_URL": "https://x.supabase.co", "SUPABASE_KEY": "k"}).remote_enabled

    def test_values_are_trimmed(self):
        config = load_config({"SUPABASE_URL": " https://x.supabase.co/ ", "SUPABASE_KEY": " k "})
        assert config.supabase_url == "https://x.supabase.co"
        assert config.supabase_key == "k"

    def test_history_path_override(self, tmp_path: Path):
        config = load_config({"OMNIFIND_HISTORY_PATH": str(tmp_path / "h.json")})
        assert config.history_path == tmp_path / "h.json"

    def test_defaults(self):
        config = StoreConfig()
        assert config.table == "divination_history"
        assert config.timeout == 10.0


class TestI18n:
    def test_translates(self):
        assert t("page_title", "zh") == "都能找"
        assert t("page_title", "en") == "OmniFind"

    def test_unknown_lang_falls_back_to_en(self):
        assert t("btn_start", "fr") == "FIND NOW"

    def test_unknown_key_returns_key(self):
        assert t("no_such_key", "zh") == "no_such_key"

    def test_every_direction_has_a_label(self):
        for d in Direction:
            assert t(f"dir_{d.value}", "zh") != f"dir_{d.value}"
