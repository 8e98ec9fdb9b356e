"""
UninstallCommand — Remove shnote data and rules

Removes ~/.shnote (config, installed pueue) and every shnote rules block or
rules file. The Python package itself is left to pip; the exact command is
printed at the end.
"""

import os
import shlex
import shutil
import subprocess
import sys

from ..commands.base import BaseCommand
from ..config import shnote_home
from ..errors import ShnoteError
from ..services.agents import find_installed_rules, remove_rules


class UninstallCommand(BaseCommand):
    """Command for removing everything shnote wrote outside the package."""

    def uninstall(self, assume_yes: bool = False) -> int:
        t = self.i18n.t
        data_dir = shnote_home()
        rules = find_installed_rules(self.cwd, self.i18n)
        argv = [sys.executable, "-m", "pip", "uninstall", "shnote"]
        pip_command = subprocess.list2cmdline(argv) if os.name == "nt" else shlex.join(argv)

        if not data_dir.exists() and not rules:
            self.out(t("uninstall_nothing"))
            self.out(t("uninstall_package_hint", command=pip_command))
            return 0

        self.out(t("uninstall_will_remove"))
        self.out()
        if data_dir.exists():
            self.out(f"  - {data_dir} ({t('uninstall_config_data')})")
        if rules:
            self.out(f"  - {t('uninstall_rules_files')}")
            for installed in rules:
                self.out(f"      {installed.path}")
        self.out()

        if not self.confirm(t("uninstall_confirm"), assume_yes):
            self.out(t("uninstall_cancelled"))
            return 0

        for installed in rules:
            self.out(f"{t('uninstall_removing')} {installed.path}...")
            remove_rules(installed, self.i18n)

        if data_dir.exists():
            self.out(f"{t('uninstall_removing')} {data_dir}...")
            try:
                shutil.rmtree(data_dir)
            except OSError as e:
                raise ShnoteError(f"{t('uninstall_removing')} {data_dir}: {e}") from e

        self.out()
        self.out(t("uninstall_success"))
        self.out(t("uninstall_package_hint", command=pip_command))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'uninstall'


def register_parser(subparsers):
    """Register uninstall command parser."""
    p = subparsers.add_parser('uninstall', help='Remove shnote data and installed rules')
    p.add_argument('--yes', '-y', action='store_true', help='Do not ask for confirmation')
    return p


def handle(cli, args):
    """Handle uninstall command dispatch."""
    return cli._uninstall_cmd.uninstall(assume_yes=args.yes)
