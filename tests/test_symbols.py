"""
Tests for Symbols — Unicode/ASCII status markers and safe printing
"""

import io
from unittest.mock import patch

from shnote.presentation.symbols import ASCII, UNICODE, get_symbols, safe_print, supports_unicode


class TestSymbolSets:

    def test_ascii_is_printable(self):
        for sym in (ASCII.check_pass, ASCII.check_warn, ASCII.check_fail, ASCII.arrow, ASCII.bullet):
            assert all(32 <= ord(c) <= 126 for c in sym), sym

    def test_unicode_differs(self):
        assert UNICODE.check_pass != ASCII.check_pass


class TestSymbolSelection:

    def test_explicit(self):
        assert get_symbols("unicode") is UNICODE
        assert get_symbols("ascii") is ASCII

    def test_auto_respects_detection(self):
        with patch("shnote.presentation.symbols.supports_unicode", return_value=True):
            assert get_symbols() is UNICODE
        with patch("shnote.presentation.symbols.supports_unicode", return_value=False):
            assert get_symbols("auto") is ASCII


class TestUnicodeDetection:

    def test_ascii_override(self, monkeypatch):
        monkeypatch.setenv("SHNOTE_ASCII_ONLY", "1")
        assert not supports_unicode()

    def test_unicode_override(self, monkeypatch):
        monkeypatch.delenv("SHNOTE_ASCII_ONLY", raising=False)
        monkeypatch.setenv("SHNOTE_UNICODE", "true")
        assert supports_unicode()


class TestSafePrint:

    def test_plain(self):
        out = io.StringIO()
        safe_print("✓ ok", file=out)
        assert out.getvalue() == "✓ ok\n"

    def test_unencodable_falls_back(self):
        raw = io.BytesIO()
        out = io.TextIOWrapper(raw, encoding="ascii")
        safe_print("✓ done → next", file=out)
        out.flush()
        assert raw.getvalue().decode("ascii") == "[OK] done -> next\n"
