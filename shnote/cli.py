"""
CLI — Entry point and shared resources

    shnote --what "<what>" --why "<why>" <run|py|node|pip|npm|npx|pueue> ...
    shnote <config|init|setup|doctor|completions|info|update|uninstall> ...

Execution-class tails never go through argparse: they are classified
verbatim so that options meant for the child (`ls --color`, `pip -q`) are
never interpreted here. Management commands are parsed by argparse.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .commands import dispatch, register_all
from .commands.completions import CompletionsCommand
from .commands.config_cmd import ConfigCommand
from .commands.doctor import DoctorCommand
from .commands.exec_cmd import ExecCommand
from .commands.info import InfoCommand
from .commands.init_cmd import InitCommand
from .commands.setup_cmd import SetupCommand
from .commands.uninstall import UninstallCommand
from .commands.update import UpdateCommand
from .config import Config, ConfigManager
from .core.gate import check_rationale, is_execution_command, split_argv
from .errors import EXIT_USAGE, ShnoteError, UsageError
from .i18n import I18n, detect_lang
from .log_utils import setup_logging
from .presentation.symbols import get_symbols
from .services.resolver import ToolResolver


class ShnoteArgumentParser(argparse.ArgumentParser):
    """argparse errors become UsageError instead of SystemExit(2)."""

    def error(self, message):
        raise UsageError(f"{self.prog}: {message}")


def build_parser() -> ShnoteArgumentParser:
    parser = ShnoteArgumentParser(
        prog="shnote",
        description="Run commands with a mandatory WHAT/WHY rationale",
        epilog='Example: shnote --what "List files" --why "Inspect layout" run ls -la',
    )
    parser.add_argument('--what', metavar='TEXT', help='What the command does (execution commands only)')
    parser.add_argument('--why', metavar='TEXT', help='Why it is being run (execution commands only)')
    parser.add_argument('--lang', choices=['zh', 'en'], help='Message language')
    parser.add_argument('--version', '-V', action='version', version=f'shnote {__version__}')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    register_all(subparsers)
    return parser


class ShnoteCLI:
    """Resources shared by every command for one invocation."""

    def __init__(self, config_manager: ConfigManager, config: Config, i18n: I18n,
                 stdin=None, stdout=None, cwd: Optional[Path] = None):
        self.config_manager = config_manager
        self.config = config
        self.i18n = i18n
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.symbols = get_symbols()
        self.resolver = ToolResolver(i18n)

        self._exec_cmd = ExecCommand(self)
        self._config_cmd = ConfigCommand(self)
        self._init_cmd = InitCommand(self)
        self._setup_cmd = SetupCommand(self)
        self._doctor_cmd = DoctorCommand(self)
        self._info_cmd = InfoCommand(self)
        self._update_cmd = UpdateCommand(self)
        self._uninstall_cmd = UninstallCommand(self)
        self._completions_cmd = CompletionsCommand(self)

    @property
    def stdin_bytes(self):
        """Binary view of stdin for --stdin scripts."""
        return getattr(self.stdin, "buffer", self.stdin)


def run(argv: List[str], stdin=None, stdout=None, cwd: Optional[Path] = None) -> int:
    """
    Execute one invocation and return the process exit code.

    Raises:
        ShnoteError: any wrapper-level failure
    """
    split = split_argv(argv, I18n(detect_lang(_lang_hint(argv))))

    config_manager = ConfigManager()
    config = config_manager.load_or_default()
    i18n = I18n(detect_lang(split.lang, config.i18n.language))
    config_manager.i18n = i18n

    parser = build_parser()

    if split.command is None:
        # Only globals: -h / -V are handled (and exit) by argparse
        parser.parse_args(split.normalized_globals())
        parser.print_help(sys.stderr)
        raise UsageError(i18n.t("err_no_command"))

    if split.command in ("run", "py", "node") and split.tail[:1] in (["-h"], ["--help"]):
        parser.parse_args([split.command, "--help"])

    rationale = check_rationale(split, i18n)
    cli = ShnoteCLI(config_manager, config, i18n, stdin=stdin, stdout=stdout, cwd=cwd)

    if is_execution_command(split.command):
        # Reject unknown global options; the tail is never parsed here
        parser.parse_args(split.normalized_globals())
        args = argparse.Namespace(command=split.command, tail=split.tail, rationale=rationale)
    else:
        args = parser.parse_args(argv)

    result = dispatch(split.command, cli, args)
    return result or 0


def _lang_hint(argv: List[str]) -> Optional[str]:
    """--lang value for messages raised while splitting argv itself."""
    for i, token in enumerate(argv):
        if token.startswith("--lang="):
            return token.split("=", 1)[1]
        if token == "--lang" and i + 1 < len(argv):
            return argv[i + 1]
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the shnote CLI.

    Wrapper failures print `error: <message>` to stderr and return their
    exit code; a child's exit code is returned unchanged.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    setup_logging()
    try:
        return run(argv)
    except ShnoteError as e:
        sys.stdout.flush()
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code
    except SystemExit as e:
        # argparse --help / --version
        if isinstance(e.code, int):
            return e.code
        return 0 if e.code is None else EXIT_USAGE


def entry_point() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == '__main__':
    entry_point()
