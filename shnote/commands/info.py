"""
InfoCommand — Version, platform, paths and component status
"""

import platform
from pathlib import Path

from .. import __version__
from ..commands.base import BaseCommand
from ..config import shnote_bin_dir, shnote_home
from ..services.pueue import installed_binary


def install_path() -> Path:
    """Directory the shnote package is imported from."""
    return Path(__file__).resolve().parent.parent


class InfoCommand(BaseCommand):
    """Command for showing installation details."""

    def info(self) -> int:
        t = self.i18n.t
        self.out(f"shnote {__version__} ({platform.system().lower()}-{platform.machine().lower()}, "
                 f"Python {platform.python_version()})")
        self.out()

        self.out(f"{t('info_paths')}:")
        rows = [
            (t("info_install_path"), install_path()),
            (t("info_config_path"), self.config_manager.path),
            (t("info_data_path"), shnote_home()),
        ]
        width = max(len(label) for label, _ in rows)
        for label, path in rows:
            self.out(f"  {label.ljust(width)}  {path}")
        self.out()

        self.out(f"{t('info_components')}:")
        bin_dir = shnote_bin_dir()
        for tool in ("pueue", "pueued"):
            path = installed_binary(tool, bin_dir)
            if path:
                self.out(f"  {tool.ljust(6)}  {t('info_installed')}  {path}")
            else:
                self.out(f"  {tool.ljust(6)}  {t('info_not_installed')}  {t('info_run_setup')}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'info'


def register_parser(subparsers):
    """Register info command parser."""
    return subparsers.add_parser('info', help='Show version, paths and components')


def handle(cli, args):
    """Handle info command dispatch."""
    return cli._info_cmd.info()
