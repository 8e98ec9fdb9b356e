"""
Tests for Configuration — defaults, validation and the config file block

The config file is a YAML document whose settings live inside a
`# shnote:config` block, so user comments around it survive writes.
"""

import pytest

from shnote.config import Config, ConfigManager, config_path, home_dir, shnote_bin_dir
from shnote.errors import EXIT_USAGE, ConfigError, HomeDirError, InvalidConfigValue


class TestConfigDefaults:

    def test_defaults(self):
        config = Config()
        assert config.get("python") == "python3"
        assert config.get("node") == "node"
        assert config.get("shell") == "auto"
        assert config.get("language") == "auto"
        assert config.get("output") == "default"
        assert config.get("color") == "true"
        assert config.should_print_header

    def test_list_covers_every_key(self):
        assert [key for key, _ in Config().list()] == list(Config.KEYS)

    def test_unknown_key_get(self):
        assert Config().get("nope") is None

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"paths": {"python": "/opt/py", "extra": 1}, "other": {}})
        assert config.paths.python == "/opt/py"
        assert config.paths.node == "node"

    def test_round_trip_dict(self):
        config = Config().with_value("why_color", "red")
        assert Config.from_dict(config.to_dict()) == config


class TestWithValue:

    def test_returns_copy(self):
        config = Config()
        updated = config.with_value("output", "quiet")
        assert config.output.mode == "default"
        assert not updated.should_print_header

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            Config().with_value("nope", "x")

    @pytest.mark.parametrize("key,value", [
        ("shell", "fish"),
        ("language", "fr"),
        ("output", "loud"),
        ("what_color", "purple"),
        ("color", "maybe"),
    ])
    def test_invalid_values(self, key, value):
        with pytest.raises(InvalidConfigValue) as exc:
            Config().with_value(key, value)
        assert exc.value.exit_code == EXIT_USAGE

    @pytest.mark.parametrize("value,expected", [("off", False), ("0", False), ("YES", True)])
    def test_color_booleans(self, value, expected):
        assert Config().with_value("color", value).output.color is expected

    def test_free_form_paths(self):
        assert Config().with_value("python", "/usr/bin/python3.12").paths.python == "/usr/bin/python3.12"


class TestPaths:

    def test_under_home(self, isolated_home):
        assert config_path() == isolated_home / ".shnote" / "config.yaml"
        assert shnote_bin_dir() == isolated_home / ".shnote" / "bin"

    def test_userprofile_fallback(self, tmp_path):
        assert home_dir({"USERPROFILE": str(tmp_path)}) == tmp_path

    def test_no_home(self):
        with pytest.raises(HomeDirError):
            home_dir({})


class TestConfigManager:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert ConfigManager(tmp_path / "config.yaml").load() == Config()

    def test_set_persists(self, tmp_path):
        manager = ConfigManager(tmp_path / "config.yaml")
        manager.set("node", "/opt/node/bin/node")
        assert ConfigManager(tmp_path / "config.yaml").get("node") == "/opt/node/bin/node"

    def test_file_layout(self, tmp_path):
        path = tmp_path / "config.yaml"
        ConfigManager(path).set("output", "quiet")
        content = path.read_text()
        assert content.startswith("# shnote:config start\n")
        assert content.endswith("# shnote:config end\n")
        assert "mode: quiet" in content

    def test_user_comments_survive(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("# my notes\n")
        manager = ConfigManager(path)
        manager.set("language", "zh")
        manager.reset()
        content = path.read_text()
        assert content.startswith("# my notes\n")
        assert manager.load() == Config()

    def test_get_unknown_key(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigManager(tmp_path / "config.yaml").get("nope")

    @pytest.mark.parametrize("content", ["paths: [unclosed\n", "- just\n- a list\n"])
    def test_broken_file(self, tmp_path, content):
        path = tmp_path / "config.yaml"
        path.write_text(content)
        manager = ConfigManager(path)
        with pytest.raises(ConfigError):
            manager.load()
        assert manager.load_or_default() == Config()

    @pytest.mark.parametrize("content", [
        "paths: [\n",
        "# shnote:config start\npaths:\n  python: python3\n",
    ])
    def test_reset_repairs_broken_file(self, tmp_path, content):
        path = tmp_path / "config.yaml"
        path.write_text(content)
        manager = ConfigManager(path)
        manager.reset()
        assert manager.load() == Config()
        assert path.read_text().startswith("# shnote:config start\n")

    def test_set_repairs_unterminated_block(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("# shnote:config start\npaths:\n  node: /opt/node\n")
        manager = ConfigManager(path)
        manager.set("output", "quiet")
        assert manager.get("output") == "quiet"
        assert manager.get("node") == "/opt/node"
        assert path.read_text().count("# shnote:config start") == 1

    def test_set_replaces_unparsable_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("paths: [\n")
        manager = ConfigManager(path)
        manager.set("language", "zh")
        assert manager.get("language") == "zh"

    def test_default_path_follows_home(self, isolated_home):
        assert ConfigManager().path == isolated_home / ".shnote" / "config.yaml"
