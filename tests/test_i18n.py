"""Tests for the i18n module."""

import pytest

from i18n import get_available_locales, get_locale, set_locale, side_name, t, tile_label
from i18n.en_US import STRINGS as EN
from i18n.zh_CN import STRINGS as ZH


@pytest.fixture(autouse=True)
def _reset_locale():
    """Restore the locale after each test."""
    original = get_locale()
    yield
    set_locale(original)


class TestSetLocale:
    def test_switch_to_en(self):
        set_locale("en_US")
        assert get_locale() == "en_US"

    def test_invalid_locale(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            set_locale("ja_JP")

    def test_available_locales(self):
        locales = get_available_locales()
        assert "zh_CN" in locales
        assert "en_US" in locales


class TestTranslation:
    def test_basic_key_en(self):
        set_locale("en_US")
        assert t("feed.host_started") == "Host started the game"

    def test_basic_key_zh(self):
        set_locale("zh_CN")
        assert t("exc.capacity") == "房间已满"

    def test_format(self):
        set_locale("en_US")
        assert t("feed.winner", player="Ana") == "Player Ana wins!"
        assert t("feed.need_players", count=2) == "Need at least 2 players to start"

    def test_missing_key(self):
        assert t("no.such.key") == "[no.such.key]"

    def test_missing_format_arg_returns_template(self):
        set_locale("en_US")
        assert t("feed.winner", other="x") == EN["feed.winner"]

    def test_tables_have_same_keys(self):
        assert set(EN) == set(ZH)


class TestHelpers:
    def test_tile_label(self):
        assert tile_label((6, 2)) == "[6|2]"
        assert tile_label([0, 0]) == "[0|0]"

    def test_side_name(self):
        set_locale("en_US")
        assert side_name("left") == "left"
        set_locale("zh_CN")
        assert side_name("right") == "右端"

    def test_side_name_unknown(self):
        assert side_name("middle") == "middle"
