"""
UpdateCommand — Upgrade shnote from the package index and refresh rules

    shnote update            upgrade, then offer to refresh outdated rules
    shnote update --check    report only
    shnote update --force    reinstall even when already current

The upgrade runs `<this python> -m pip install --upgrade shnote` through the
executor, so pip's output streams straight to the terminal. The rules check
then runs in a fresh `python -m shnote update --rules` process so that it
compares against the newly installed rules text.
"""

import difflib
import json
import sys
import urllib.error
import urllib.request
from typing import Callable, Optional

from .. import __version__
from ..commands.base import BaseCommand
from ..content.rules import rules_text
from ..errors import SetupError
from ..i18n import I18n
from ..services.agents import find_installed_rules, is_outdated, refresh_rules
from ..services.executor import ChildSpec, spawn
from .init_cmd import pueue_available

PACKAGE_NAME = "shnote"
INDEX_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"
FETCH_TIMEOUT = 15


def fetch_latest_version(i18n: Optional[I18n] = None,
                         opener: Callable = urllib.request.urlopen) -> str:
    """
    Raises:
        SetupError: index unreachable or response malformed
    """
    i18n = i18n or I18n()
    req = urllib.request.Request(INDEX_URL, headers={"Accept": "application/json"})
    try:
        with opener(req, timeout=FETCH_TIMEOUT) as response:
            data = json.loads(response.read().decode("utf-8"))
        return str(data["info"]["version"]).lstrip("v")
    except (urllib.error.URLError, OSError) as e:
        raise SetupError(i18n.t("update_err_fetch", reason=getattr(e, "reason", None) or e)) from e
    except (ValueError, KeyError, TypeError) as e:
        raise SetupError(i18n.t("update_err_fetch", reason=e)) from e


class UpdateCommand(BaseCommand):
    """Command for self-update and rules refresh."""

    def update(self, check: bool = False, force: bool = False) -> int:
        t = self.i18n.t
        self.out(t("update_checking"))
        self.out(f"  {t('update_current_version')}: {__version__}")
        latest = fetch_latest_version(self.i18n)
        self.out(f"  {t('update_latest_version')}: {latest}")
        self.out()

        if latest == __version__ and not force:
            self.out(t("update_already_latest"))
            return 0

        if check:
            if latest != __version__:
                self.out(t("update_available", version=latest))
            return 0

        self.out(t("update_installing", version=latest))
        pip = ChildSpec(sys.executable, ("-m", "pip", "install", "--upgrade", PACKAGE_NAME))
        code = spawn(pip, self.i18n).exit_code
        if code != 0:
            self.out(t("update_failed", code=code))
            return code

        self.out(t("update_success", version=latest))
        self.out()
        refresh = ChildSpec(sys.executable, ("-m", "shnote", "--lang", self.i18n.lang.value,
                                             "update", "--rules"))
        return spawn(refresh, self.i18n).exit_code

    def refresh_rules(self, assume_yes: bool = False) -> int:
        """Compare installed rules against the current text and offer to refresh."""
        t = self.i18n.t
        installed = find_installed_rules(self.cwd, self.i18n)
        if not installed:
            return 0

        self.out(t("update_rules_checking"))
        content = rules_text(self.i18n.lang, with_pueue=pueue_available(self.resolver.which))
        outdated = [rules for rules in installed if is_outdated(rules, content)]
        if not outdated:
            self.out(t("update_rules_current"))
            return 0

        for rules in outdated:
            self.out(t("update_rules_outdated", path=rules.path))
            diff = difflib.unified_diff(
                rules.body.replace("\r\n", "\n").splitlines(), content.splitlines(),
                fromfile=str(rules.path), tofile=PACKAGE_NAME, lineterm="")
            for line in diff:
                self.out(f"    {line}")

        if not self.confirm(t("update_rules_prompt"), assume_yes):
            return 0
        for rules in outdated:
            refresh_rules(rules, content, self.i18n)
            self.out(t("update_rules_refreshed", path=rules.path))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'update'


def register_parser(subparsers):
    """Register update command parser."""
    p = subparsers.add_parser('update', help='Upgrade shnote and refresh installed rules')
    p.add_argument('--check', action='store_true', help='Only check for a newer version')
    p.add_argument('--force', action='store_true', help='Reinstall even if already up to date')
    p.add_argument('--rules', action='store_true', help='Only check installed rules (no network)')
    p.add_argument('--yes', '-y', action='store_true', help='Refresh outdated rules without asking')
    return p


def handle(cli, args):
    """Handle update command dispatch."""
    if args.rules:
        return cli._update_cmd.refresh_rules(assume_yes=args.yes)
    return cli._update_cmd.update(check=args.check, force=args.force)
