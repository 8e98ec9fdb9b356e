"""
Tests for DoctorCommand — tool availability report
"""

from unittest.mock import patch

import pytest

from shnote.commands.doctor import DoctorCommand

ALL_TOOLS = {
    "python3": "/usr/bin/python3",
    "node": "/usr/bin/node",
    "sh": "/bin/sh",
    "pueue": "/usr/bin/pueue",
    "pueued": "/usr/bin/pueued",
}


@pytest.fixture(autouse=True)
def no_version_probe():
    with patch("shnote.commands.doctor.tool_version", return_value="v1.0"):
        yield


def doctor_for(shnote_factory, tools):
    shnote_factory.set_path(tools)
    shnote_factory.write_config(shell="sh")
    return shnote_factory.create_command(DoctorCommand)


class TestDoctor:

    def test_all_found(self, shnote_factory):
        cmd = doctor_for(shnote_factory, ALL_TOOLS)
        assert cmd.doctor() == 0
        output = shnote_factory.output()
        assert "[OK] python: /usr/bin/python3 (v1.0)" in output
        assert "[OK] shell (sh): /bin/sh" in output
        assert "[X]" not in output

    def test_missing_node(self, shnote_factory):
        tools = {k: v for k, v in ALL_TOOLS.items() if k != "node"}
        cmd = doctor_for(shnote_factory, tools)
        assert cmd.doctor() == 1
        assert "[X] node: not found in PATH" in shnote_factory.output()

    def test_installed_pueue_counts(self, shnote_factory):
        bin_dir = shnote_factory.shnote_dir / "bin"
        bin_dir.mkdir(parents=True)
        for tool in ("pueue", "pueued"):
            (bin_dir / tool).write_text("")
        tools = {k: v for k, v in ALL_TOOLS.items() if not k.startswith("pueue")}
        results = {r.name: r for r in doctor_for(shnote_factory, tools).run_checks()}
        assert results["pueue"].path == str(bin_dir / "pueue")
        assert results["pueued"].ok

    def test_configured_shell_missing(self, shnote_factory):
        shnote_factory.set_path({})
        shnote_factory.write_config(shell="zsh")
        results = shnote_factory.create_command(DoctorCommand).run_checks()
        shell = [r for r in results if r.name == "shell"][0]
        assert not shell.ok
        assert "zsh" in shell.error
