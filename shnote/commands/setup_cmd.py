"""
SetupCommand — Install pueue/pueued into ~/.shnote/bin
"""

import os

from ..commands.base import BaseCommand
from ..config import shnote_bin_dir
from ..services.pueue import install_pueue, platform_assets


class SetupCommand(BaseCommand):
    """Command for downloading and verifying the background task runner."""

    def setup(self) -> int:
        t = self.i18n.t
        symbols = self.symbols
        bin_dir = shnote_bin_dir()
        assets = platform_assets(i18n=self.i18n)

        self.out(t("setup_starting"))
        self.out(t("setup_platform", platform=assets.target))
        self.out(t("setup_target_dir", path=bin_dir))
        self.out()

        self.out(t("setup_downloading"))
        proxy = os.environ.get("GITHUB_PROXY")
        if proxy:
            self.out(t("setup_using_proxy", proxy=proxy))
        installed = install_pueue(bin_dir, assets, i18n=self.i18n, report=self.out)
        for tool, path in installed.items():
            self.out(f"  {symbols.check_pass} {tool} {symbols.arrow} {path}")

        self.out()
        self.out(t("setup_path_instruction"))
        self.out()
        if os.name == "nt":
            self.out(f"  {bin_dir}")
        else:
            self.out(f"  export PATH=\"{bin_dir}:$PATH\"")
        self.out()
        self.out(t("setup_complete"))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'setup'


def register_parser(subparsers):
    """Register setup command parser."""
    return subparsers.add_parser('setup', help='Download pueue/pueued into ~/.shnote/bin')


def handle(cli, args):
    """Handle setup command dispatch."""
    return cli._setup_cmd.setup()
