"""
shnote — Run commands with a mandatory WHAT/WHY rationale

Every command an agent runs states what it does and why, before it runs:

    shnote --what "List files" --why "Inspect project layout" run ls -la
    WHAT: List files
    WHY: Inspect project layout
    ...ls output...

The child process inherits the terminal unchanged and its exit code is
shnote's exit code.

Usage:
    shnote --what "..." --why "..." run <command> [args...]
    shnote --what "..." --why "..." py -c '<code>' | -f <file> | --stdin
    shnote --what "..." --why "..." node -c '<code>' | -f <file> | --stdin
    shnote --what "..." --why "..." pip|npm|npx|pueue <args...>
    shnote config list|get|set|reset|path
    shnote init claude|codex|gemini [--scope user|project]
    shnote setup | doctor | info | update | uninstall | completions <shell>
"""

__version__ = "0.1.0"

from .errors import (
    ShnoteError, UsageError, MissingRationale, UnexpectedRationale, UnknownCommand,
    ScriptSourceRequired, FileNotFound, ToolNotFound, ChildSpawnFailed, CorruptMarkedBlock,
    ConfigError,
)
from .config import Config, ConfigManager
from .i18n import I18n, Lang

__all__ = [
    "__version__",
    # Errors
    "ShnoteError", "UsageError", "MissingRationale", "UnexpectedRationale", "UnknownCommand",
    "ScriptSourceRequired", "FileNotFound", "ToolNotFound", "ChildSpawnFailed",
    "CorruptMarkedBlock", "ConfigError",
    # Config
    "Config", "ConfigManager",
    # I18n
    "I18n", "Lang",
]
