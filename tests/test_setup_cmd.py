"""
Tests for SetupCommand — pueue download into ~/.shnote/bin
"""

import os
from unittest.mock import patch

import pytest

from shnote.commands.setup_cmd import SetupCommand
from shnote.errors import SetupError
from shnote.services.pueue import PLATFORM_ASSETS

LINUX = PLATFORM_ASSETS[("linux", "x86_64")]


class TestSetup:

    def test_installs_and_prints_path(self, shnote_factory):
        bin_dir = shnote_factory.shnote_dir / "bin"
        installed = {"pueue": bin_dir / "pueue", "pueued": bin_dir / "pueued"}
        cmd = shnote_factory.create_command(SetupCommand)
        with patch("shnote.commands.setup_cmd.platform_assets", return_value=LINUX), \
             patch("shnote.commands.setup_cmd.install_pueue", return_value=installed) as install:
            assert cmd.setup() == 0

        assert install.call_args[0][:2] == (bin_dir, LINUX)
        output = shnote_factory.output()
        assert LINUX.target in output
        assert f"[OK] pueue -> {bin_dir / 'pueue'}" in output
        if os.name != "nt":
            assert f'export PATH="{bin_dir}:$PATH"' in output

    def test_proxy_reported(self, shnote_factory, monkeypatch):
        monkeypatch.setenv("GITHUB_PROXY", "https://mirror.example")
        cmd = shnote_factory.create_command(SetupCommand)
        with patch("shnote.commands.setup_cmd.platform_assets", return_value=LINUX), \
             patch("shnote.commands.setup_cmd.install_pueue", return_value={}):
            cmd.setup()
        assert "https://mirror.example" in shnote_factory.output()

    def test_unsupported_platform(self, shnote_factory):
        cmd = shnote_factory.create_command(SetupCommand)
        with patch("shnote.commands.setup_cmd.platform_assets", side_effect=SetupError("unsupported")):
            with pytest.raises(SetupError):
                cmd.setup()
