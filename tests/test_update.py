"""
Tests for UpdateCommand — version check, upgrade, rules refresh

The package index and pip are never contacted: fetch_latest_version gets a
fake opener and spawn is patched.
"""

import io
import json
import sys
import urllib.error
from unittest.mock import patch

import pytest

from shnote import __version__
from shnote.commands.update import UpdateCommand, fetch_latest_version
from shnote.content.rules import rules_text
from shnote.core.blocks import MarkedBlock, apply_block
from shnote.errors import SetupError
from shnote.i18n import Lang
from shnote.services.executor import ChildExit


def index_opener(payload):
    return lambda request, timeout=None: io.BytesIO(payload)


class TestFetchLatestVersion:

    def test_version(self):
        payload = json.dumps({"info": {"version": "1.2.3"}}).encode()
        assert fetch_latest_version(opener=index_opener(payload)) == "1.2.3"

    def test_malformed(self):
        with pytest.raises(SetupError):
            fetch_latest_version(opener=index_opener(b"<html>"))

    def test_unreachable(self):
        def opener(request, timeout=None):
            raise urllib.error.URLError("offline")
        with pytest.raises(SetupError) as exc:
            fetch_latest_version(opener=opener)
        assert "offline" in str(exc.value)


@pytest.fixture
def update_command(shnote_factory):
    return shnote_factory.create_command(UpdateCommand)


def latest(version):
    return patch("shnote.commands.update.fetch_latest_version", return_value=version)


class TestUpdate:

    def test_already_latest(self, update_command, shnote_factory):
        with latest(__version__), patch("shnote.commands.update.spawn") as spawn:
            assert update_command.update() == 0
        spawn.assert_not_called()
        assert "already using the latest" in shnote_factory.output()

    def test_check_only(self, update_command, shnote_factory):
        with latest("99.0.0"), patch("shnote.commands.update.spawn") as spawn:
            assert update_command.update(check=True) == 0
        spawn.assert_not_called()
        assert "New version available: 99.0.0" in shnote_factory.output()

    def test_upgrade_then_rules_check(self, update_command):
        with latest("99.0.0"), patch("shnote.commands.update.spawn", return_value=ChildExit(0)) as spawn:
            assert update_command.update() == 0

        pip_spec, rules_spec = (call[0][0] for call in spawn.call_args_list)
        assert pip_spec.argv == [sys.executable, "-m", "pip", "install", "--upgrade", "shnote"]
        assert rules_spec.argv == [sys.executable, "-m", "shnote", "--lang", "en", "update", "--rules"]

    def test_force_reinstalls_same_version(self, update_command):
        with latest(__version__), patch("shnote.commands.update.spawn", return_value=ChildExit(0)) as spawn:
            update_command.update(force=True)
        assert spawn.call_count == 2

    def test_pip_failure(self, update_command, shnote_factory):
        with latest("99.0.0"), patch("shnote.commands.update.spawn", return_value=ChildExit(3)) as spawn:
            assert update_command.update() == 3
        assert spawn.call_count == 1
        assert "pip exited with status 3" in shnote_factory.output()


class TestRefreshRules:

    def _install_stale(self, shnote_factory):
        path = shnote_factory.project_dir / ".claude" / "rules" / "shnote.md"
        path.parent.mkdir(parents=True)
        path.write_text("# old rules\n")
        return path

    def test_nothing_installed(self, update_command, shnote_factory):
        assert update_command.refresh_rules() == 0
        assert shnote_factory.output() == ""

    def test_refresh_confirmed(self, update_command, shnote_factory):
        path = self._install_stale(shnote_factory)
        assert update_command.refresh_rules(assume_yes=True) == 0
        assert path.read_text(encoding="utf-8") == rules_text(Lang.EN, with_pueue=False)
        output = shnote_factory.output()
        assert "outdated" in output
        assert "-# old rules" in output

    def test_refresh_declined(self, shnote_factory):
        path = self._install_stale(shnote_factory)
        shnote_factory.set_input("n\n")
        cmd = shnote_factory.create_command(UpdateCommand)
        cmd.refresh_rules()
        assert path.read_text() == "# old rules\n"

    def test_current_rules(self, update_command, shnote_factory):
        path = shnote_factory.project_dir / "AGENTS.md"
        path.write_text("mine\n")
        apply_block(MarkedBlock(path, "rules", rules_text(Lang.EN, with_pueue=False)))
        update_command.refresh_rules()
        assert "up to date" in shnote_factory.output()
