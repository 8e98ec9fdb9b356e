"""
Tests for UninstallCommand — remove ~/.shnote and installed rules
"""

import pytest

from shnote.commands.uninstall import UninstallCommand
from shnote.core.blocks import MarkedBlock, apply_block


@pytest.fixture
def installed(shnote_factory):
    """Data dir plus one owned rules file and one shared block."""
    (shnote_factory.shnote_dir / "bin").mkdir(parents=True)
    shnote_factory.write_config(output="quiet")

    owned = shnote_factory.home / ".claude" / "rules" / "shnote.md"
    owned.parent.mkdir(parents=True)
    owned.write_text("rules\n")

    shared = shnote_factory.project_dir / "AGENTS.md"
    shared.write_text("mine\n")
    apply_block(MarkedBlock(shared, "rules", "rules\n"))
    return owned, shared


class TestUninstall:

    def test_nothing(self, shnote_factory):
        assert shnote_factory.create_command(UninstallCommand).uninstall() == 0
        output = shnote_factory.output()
        assert "Nothing to remove." in output
        assert "pip uninstall shnote" in output

    def test_confirmed(self, shnote_factory, installed):
        owned, shared = installed
        assert shnote_factory.create_command(UninstallCommand).uninstall(assume_yes=True) == 0
        assert not shnote_factory.shnote_dir.exists()
        assert not owned.exists()
        assert shared.read_text() == "mine\n"
        output = shnote_factory.output()
        assert str(owned) in output
        assert "shnote data removed." in output

    def test_cancelled(self, shnote_factory, installed):
        owned, shared = installed
        shnote_factory.set_input("no\n")
        cmd = shnote_factory.create_command(UninstallCommand)
        assert cmd.uninstall() == 0
        assert shnote_factory.shnote_dir.exists()
        assert owned.exists()
        assert "Uninstall cancelled." in shnote_factory.output()

    def test_yes_answer(self, shnote_factory, installed):
        shnote_factory.set_input("y\n")
        shnote_factory.create_command(UninstallCommand).uninstall()
        assert not shnote_factory.shnote_dir.exists()
