"""
Errors — Wrapper-level failure taxonomy and exit-code bands

Every failure the wrapper itself detects derives from ShnoteError and
carries the exit code main() returns for it. Child processes that run and
fail are NOT errors: their status is passed through by the executor.

Exit-code bands:
  1        generic wrapper failure (config I/O, network, setup)
  64-66    validation (usage, corrupt block, missing script file)
  126      child could not be spawned (permission, exec format)
  127      tool could not be resolved
  128+N    child terminated by signal N (see services.executor)
"""

EXIT_FAILURE = 1
EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SPAWN_FAILED = 126
EXIT_TOOL_NOT_FOUND = 127
SIGNAL_EXIT_BASE = 128


class ShnoteError(Exception):
    """Base class for failures detected by the wrapper."""
    exit_code = EXIT_FAILURE


class UsageError(ShnoteError):
    """Malformed command line (raised instead of argparse's SystemExit)."""
    exit_code = EXIT_USAGE


class MissingRationale(UsageError):
    """Execution-class command without --what/--why before the subcommand."""

    def __init__(self, message: str, command: str, missing: tuple = (), misplaced: tuple = ()):
        super().__init__(message)
        self.command = command
        self.missing = missing
        self.misplaced = misplaced


class UnexpectedRationale(UsageError):
    """--what/--why given to a management command."""

    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.command = command


class UnknownCommand(UsageError):
    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.command = command


class ScriptSourceRequired(UsageError):
    """py/node given zero or several of -c/-f/--stdin."""


class FileNotFound(ShnoteError):
    exit_code = EXIT_NOINPUT

    def __init__(self, message: str, path):
        super().__init__(message)
        self.path = path


class ToolNotFound(ShnoteError):
    exit_code = EXIT_TOOL_NOT_FOUND

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name


class ChildSpawnFailed(ShnoteError):
    exit_code = EXIT_SPAWN_FAILED

    def __init__(self, message: str, program: str):
        super().__init__(message)
        self.program = program


class CorruptMarkedBlock(ShnoteError):
    """Begin marker without a matching end marker (or duplicated markers)."""
    exit_code = EXIT_DATAERR

    def __init__(self, message: str, path, marker_id: str):
        super().__init__(message)
        self.path = path
        self.marker_id = marker_id


class ConfigError(ShnoteError):
    """Config file unreadable, unparseable, unwritable, or invalid value."""


class InvalidConfigValue(ConfigError):
    exit_code = EXIT_USAGE


class HomeDirError(ShnoteError):
    """Neither HOME nor USERPROFILE is set."""


class SetupError(ShnoteError):
    """Download, checksum, or install failure in setup/update."""
