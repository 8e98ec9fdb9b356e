"""
Tests for I18n — language detection and message table
"""

import pytest

from shnote.i18n import MESSAGES, I18n, Lang, detect_lang, lang_from_env


class TestLangFromTag:

    @pytest.mark.parametrize("tag,expected", [
        ("zh_CN.UTF-8", Lang.ZH),
        ("zh-TW", Lang.ZH),
        ("en_US.UTF-8", Lang.EN),
        ("C", None),
        ("POSIX", None),
        ("fr_FR", None),
        ("", None),
        (None, None),
    ])
    def test_from_tag(self, tag, expected):
        assert Lang.from_tag(tag) is expected


class TestDetection:
    """--lang > config > environment > English."""

    def test_flag_wins(self):
        assert detect_lang("en", "zh", {"LANG": "zh_CN.UTF-8"}) is Lang.EN

    def test_config_over_env(self):
        assert detect_lang(None, "zh", {"LANG": "en_US.UTF-8"}) is Lang.ZH

    def test_env_when_auto(self):
        assert detect_lang(None, "auto", {"LC_ALL": "zh_CN.UTF-8"}) is Lang.ZH

    def test_default_english(self):
        assert detect_lang(None, "auto", {}) is Lang.EN

    def test_shnote_lang_first(self):
        assert lang_from_env({"SHNOTE_LANG": "en", "LANG": "zh_CN"}) is Lang.EN

    def test_c_locale_falls_through(self):
        assert lang_from_env({"LC_ALL": "C", "LANG": "zh_CN.UTF-8"}) is Lang.ZH

    def test_language_priority_list(self):
        assert lang_from_env({"LANGUAGE": "zh_CN:en_US"}) is Lang.ZH


class TestMessages:

    def test_every_message_has_both_languages(self):
        for key, entry in MESSAGES.items():
            assert set(entry) == {Lang.EN, Lang.ZH}, key

    def test_format(self):
        assert I18n(Lang.EN).t("config_updated", key="node", value="x") == "config updated: node = x"

    def test_chinese(self):
        assert I18n(Lang.ZH).t("uninstall_nothing") == "没有需要删除的内容。"
