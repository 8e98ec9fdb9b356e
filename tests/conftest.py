"""
Shared pytest fixtures for the shnote test suite.

Every test runs with HOME pointing into tmp_path, so nothing touches the
real ~/.shnote or the real agent instruction files.

Usage in tests:
    def test_something(shnote_factory):
        cmd = shnote_factory.create_command(InfoCommand)
        cmd.info()
        assert "shnote" in shnote_factory.output()
"""

import pytest

from shnote.i18n import LANG_ENV_KEYS
from shnote.log_utils import reset_logging
from tests.factories import ShnoteTestFactory


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Fake home directory and a neutral environment for every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in LANG_ENV_KEYS + ("NO_COLOR", "GITHUB_PROXY", "SHNOTE_LOG", "SHNOTE_LOG_FILE"):
        monkeypatch.delenv(key, raising=False)
    yield home
    reset_logging()


@pytest.fixture
def shnote_factory(tmp_path, isolated_home):
    """
    Create an empty ShnoteTestFactory.

    Example:
        def test_config_list(shnote_factory):
            cmd = shnote_factory.create_command(ConfigCommand)
            assert cmd.list() == 0
    """
    return ShnoteTestFactory(tmp_path, isolated_home)
