"""
BaseCommand — Shared foundation for all CLI commands

Provides access to CLI resources via composition.
Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

from ..presentation.symbols import safe_print

if TYPE_CHECKING:
    from ..cli import ShnoteCLI


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reinitialize resources; they access them via the CLI instance.
    """

    def __init__(self, cli: 'ShnoteCLI'):
        """
        Initialize command with CLI instance.

        Args:
            cli: The main ShnoteCLI instance holding all resources
        """
        self._cli = cli

    # -------------------------------------------------------------------------
    # Core resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def config(self):
        """Immutable configuration loaded for this invocation."""
        return self._cli.config

    @property
    def config_manager(self):
        """Config file persistence."""
        return self._cli.config_manager

    @property
    def i18n(self):
        """Localized message lookup."""
        return self._cli.i18n

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def resolver(self):
        """Interpreter and tool lookup."""
        return self._cli.resolver

    @property
    def cwd(self):
        return self._cli.cwd

    # -------------------------------------------------------------------------
    # Output helpers
    # -------------------------------------------------------------------------

    def out(self, text: str = "") -> None:
        safe_print(text, file=self._cli.stdout)

    def confirm(self, question: str, assume_yes: bool = False) -> bool:
        """Ask a y/N question on the terminal. Non-interactive input means no."""
        if assume_yes:
            return True
        self._cli.stdout.write(f"{question} [y/N] ")
        self._cli.stdout.flush()
        try:
            answer = self._cli.stdin.readline()
        except (OSError, ValueError):
            return False
        return answer.strip().lower() in ("y", "yes")
