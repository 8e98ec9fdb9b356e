"""
Tests for ConfigCommand — config list/get/set/reset/path
"""

import pytest

from shnote.commands.config_cmd import ConfigCommand
from shnote.errors import ConfigError, InvalidConfigValue


@pytest.fixture
def config_command(shnote_factory):
    return shnote_factory.create_command(ConfigCommand)


class TestConfigCommand:

    def test_list(self, config_command, shnote_factory):
        assert config_command.list() == 0
        lines = shnote_factory.output().splitlines()
        assert len(lines) == 8
        assert lines[0].split() == ["python", "=", "python3"]
        assert all(" = " in line for line in lines)

    def test_set_then_get(self, config_command, shnote_factory):
        assert config_command.set("color", "no") == 0
        assert "config updated: color = false" in shnote_factory.output()
        config_command.get("color")
        assert shnote_factory.output().splitlines()[-1] == "false"

    def test_set_unknown_key(self, config_command):
        with pytest.raises(ConfigError):
            config_command.set("nope", "1")

    def test_set_invalid_value(self, config_command, shnote_factory):
        with pytest.raises(InvalidConfigValue):
            config_command.set("output", "loud")
        assert not shnote_factory.config_manager.path.exists()

    def test_reset(self, config_command, shnote_factory):
        shnote_factory.write_config(shell="zsh")
        assert config_command.reset() == 0
        assert shnote_factory.config_manager.load().paths.shell == "auto"

    def test_path(self, config_command, shnote_factory):
        config_command.path()
        assert shnote_factory.output().strip() == str(shnote_factory.shnote_dir / "config.yaml")
