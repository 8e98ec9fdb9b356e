"""
InitCommand — Install shnote rules for an AI agent

    shnote init claude [-s user|project]
    shnote init codex
    shnote init gemini

Re-running is safe: an unchanged rules block is left byte-identical.
"""

import shutil

from ..commands.base import BaseCommand
from ..content.rules import rules_text
from ..core.blocks import MergeAction
from ..services.agents import AgentType, Scope, detect_tool, install_rules
from ..services.pueue import installed_binary

_ACTION_MESSAGES = {
    MergeAction.INSERTED: "init_rules_inserted",
    MergeAction.UPDATED: "init_rules_updated",
    MergeAction.UNCHANGED: "init_rules_unchanged",
}


def pueue_available(which=shutil.which) -> bool:
    return installed_binary("pueue") is not None or which("pueue") is not None


class InitCommand(BaseCommand):
    """Command for installing agent rules."""

    def init(self, agent: AgentType, scope: Scope) -> int:
        symbols = self.symbols

        tool = detect_tool(agent.value, which=self.resolver.which)
        if tool:
            self.out(self.i18n.t("init_tool_found", check=symbols.check_pass, tool=agent.value,
                                 version=tool.version or self.i18n.t("info_unknown"), path=tool.path))
        else:
            self.out(self.i18n.t("init_tool_not_found", tool=agent.value))

        content = rules_text(self.i18n.lang, with_pueue=pueue_available(self.resolver.which))
        report = install_rules(agent, scope, content, tool=tool, cwd=self.cwd, i18n=self.i18n)

        self.out(self.i18n.t("init_success", check=symbols.check_pass, path=report.path))
        message = _ACTION_MESSAGES.get(report.result.action)
        if message:
            self.out(self.i18n.t(message))
        if report.cleaned:
            self.out(self.i18n.t("init_old_rules_cleaned", path=report.cleaned))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'init'


def register_parser(subparsers):
    """Register init command parser."""
    p = subparsers.add_parser('init', help='Install shnote rules for an AI agent')
    p.add_argument('target', choices=[a.value for a in AgentType],
                   help='Agent to configure')
    p.add_argument('--scope', '-s', choices=['user', 'project', 'u', 'p'], default='user',
                   help='user: home directory (default), project: current directory')
    return p


def handle(cli, args):
    """Handle init command dispatch."""
    return cli._init_cmd.init(AgentType(args.target), Scope.from_arg(args.scope))
