"""
Configuration — Centralized settings management

Single user-level file: ~/.shnote/config.yaml

The settings live inside a shnote-owned marked block, so comments the user
writes around it survive `config set` and `config reset`:

    # my notes
    # shnote:config start
    paths:
      python: python3
    ...
    # shnote:config end

A file that cannot be merged into (bad YAML, damaged block) is rewritten
with only the block.

The loaded Config is immutable. It is read once per invocation and passed
explicitly to the executor and the announcement emitter.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .core.blocks import HASH, MarkedBlock, apply_block, merge_text, overwrite_file, read_text, remove_text
from .errors import ConfigError, CorruptMarkedBlock, HomeDirError, InvalidConfigValue, ShnoteError
from .i18n import I18n

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".shnote"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_BLOCK_ID = "config"

VALID_SHELLS = ("auto", "sh", "bash", "zsh", "pwsh", "cmd")
VALID_LANGUAGES = ("auto", "zh", "en")
VALID_OUTPUT_MODES = ("default", "quiet")
VALID_COLORS = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white", "default")
TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")


def home_dir(environ=None) -> Path:
    environ = os.environ if environ is None else environ
    home = environ.get("HOME") or environ.get("USERPROFILE")
    if not home:
        raise HomeDirError(I18n().t("err_home_dir"))
    return Path(home)


def shnote_home() -> Path:
    return home_dir() / CONFIG_DIR_NAME


def shnote_bin_dir() -> Path:
    return shnote_home() / "bin"


def config_path() -> Path:
    return shnote_home() / CONFIG_FILE_NAME


@dataclass(frozen=True)
class PathsConfig:
    """Interpreter and shell preferences."""
    python: str = "python3"  # path or command name
    node: str = "node"
    shell: str = "auto"      # auto | sh | bash | zsh | pwsh | cmd


@dataclass(frozen=True)
class I18nConfig:
    language: str = "auto"   # auto | zh | en


@dataclass(frozen=True)
class OutputConfig:
    """Preamble preferences."""
    mode: str = "default"    # default | quiet
    color: bool = True
    what_color: str = "cyan"
    why_color: str = "magenta"


@dataclass(frozen=True)
class Config:
    """Application configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    i18n: I18nConfig = field(default_factory=I18nConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Flat user-facing key -> (section, attribute)
    KEYS = {
        "python": ("paths", "python"),
        "node": ("paths", "node"),
        "shell": ("paths", "shell"),
        "language": ("i18n", "language"),
        "output": ("output", "mode"),
        "color": ("output", "color"),
        "what_color": ("output", "what_color"),
        "why_color": ("output", "why_color"),
    }

    @property
    def should_print_header(self) -> bool:
        return self.output.mode != "quiet"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "paths": dataclasses.asdict(self.paths),
            "i18n": dataclasses.asdict(self.i18n),
            "output": dataclasses.asdict(self.output),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary. Unknown keys are ignored."""
        paths_data = data.get("paths") or {}
        i18n_data = data.get("i18n") or {}
        output_data = data.get("output") or {}

        defaults = cls()
        return cls(
            paths=PathsConfig(
                python=str(paths_data.get("python", defaults.paths.python)),
                node=str(paths_data.get("node", defaults.paths.node)),
                shell=str(paths_data.get("shell", defaults.paths.shell)),
            ),
            i18n=I18nConfig(
                language=str(i18n_data.get("language", defaults.i18n.language)),
            ),
            output=OutputConfig(
                mode=str(output_data.get("mode", defaults.output.mode)),
                color=_as_bool(output_data.get("color", defaults.output.color)),
                what_color=str(output_data.get("what_color", defaults.output.what_color)),
                why_color=str(output_data.get("why_color", defaults.output.why_color)),
            ),
        )

    def get(self, key: str) -> Optional[str]:
        if key not in self.KEYS:
            return None
        section, attr = self.KEYS[key]
        value = getattr(getattr(self, section), attr)
        if isinstance(value, bool):
            return str(value).lower()
        return value

    def with_value(self, key: str, value: str, i18n: Optional[I18n] = None) -> 'Config':
        """
        Return a copy with `key` set to `value`.

        Raises:
            ConfigError: unknown key
            InvalidConfigValue: value not in the key's valid options
        """
        i18n = i18n or I18n()
        if key not in self.KEYS:
            raise ConfigError(i18n.t("config_key_not_found", key=key))

        valid = {
            "shell": VALID_SHELLS,
            "language": VALID_LANGUAGES,
            "output": VALID_OUTPUT_MODES,
            "what_color": VALID_COLORS,
            "why_color": VALID_COLORS,
        }.get(key)
        new_value: Any = value
        if valid and value not in valid:
            raise InvalidConfigValue(
                i18n.t("err_invalid_config_value", key=key, value=value, valid=", ".join(valid)))
        if key == "color":
            lowered = value.lower()
            if lowered not in TRUE_VALUES + FALSE_VALUES:
                raise InvalidConfigValue(
                    i18n.t("err_invalid_config_value", key=key, value=value, valid="true, false"))
            new_value = lowered in TRUE_VALUES

        section, attr = self.KEYS[key]
        updated = dataclasses.replace(getattr(self, section), **{attr: new_value})
        return dataclasses.replace(self, **{section: updated})

    def list(self) -> List[Tuple[str, str]]:
        return [(key, self.get(key)) for key in self.KEYS]


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in TRUE_VALUES


class ConfigManager:
    """
    Manages configuration loading and persistence.

    The path is resolved lazily so that `HOME` changes (tests, sudo) are
    honoured at call time.
    """

    def __init__(self, path: Optional[Path] = None, i18n: Optional[I18n] = None):
        self._path = Path(path) if path else None
        self.i18n = i18n or I18n()

    @property
    def path(self) -> Path:
        return self._path or config_path()

    def load(self) -> Config:
        """
        Load configuration from disk. Missing file -> defaults.

        Raises:
            ConfigError: file unreadable or not valid YAML mapping
        """
        path = self.path
        if not path.exists():
            return Config()
        try:
            data = yaml.safe_load(read_text(path, self.i18n)) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{self.i18n.t('err_parse_config', path=path)}: {e}") from e
        except ShnoteError as e:
            raise ConfigError(self.i18n.t("err_read_config", path=path)) from e
        if not isinstance(data, dict):
            raise ConfigError(self.i18n.t("err_parse_config", path=path))
        return Config.from_dict(data)

    def load_or_default(self) -> Config:
        """Load for execution commands: a broken config must not block running."""
        try:
            return self.load()
        except (ConfigError, HomeDirError) as e:
            logger.warning("using default config: %s", e)
            return Config()

    def save(self, config: Config, repair: bool = False) -> Path:
        """
        Write `config` into the shnote block of the config file.

        With `repair`, a file that cannot be merged into (unparsable YAML or a
        damaged block) is replaced by one holding only the shnote block.
        """
        path = self.path
        body = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False,
                              allow_unicode=True)
        block = MarkedBlock(path, CONFIG_BLOCK_ID, body, HASH)
        try:
            if repair and not self._mergeable():
                logger.warning("rewriting unreadable config file %s", path)
                overwrite_file(path, merge_text("", block, self.i18n), self.i18n)
            else:
                apply_block(block, self.i18n)
        except CorruptMarkedBlock:
            raise
        except ShnoteError as e:
            raise ConfigError(f"{self.i18n.t('err_write_config', path=path)}: {e}") from e
        return path

    def _mergeable(self) -> bool:
        try:
            self.load()
            remove_text(read_text(self.path, self.i18n), CONFIG_BLOCK_ID, HASH,
                        path=self.path, i18n=self.i18n)
        except (ConfigError, CorruptMarkedBlock):
            return False
        return True

    def set(self, key: str, value: str) -> Config:
        try:
            current = self.load()
        except ConfigError as e:
            logger.warning("replacing unreadable config: %s", e)
            current = Config()
        config = current.with_value(key, value, self.i18n)
        self.save(config, repair=True)
        return config

    def get(self, key: str) -> str:
        value = self.load().get(key)
        if value is None:
            raise ConfigError(self.i18n.t("config_key_not_found", key=key))
        return value

    def reset(self) -> Config:
        config = Config()
        self.save(config, repair=True)
        return config
