"""
ExecCommand — run, py, node, pip, npm, npx, pueue

Flow for one invocation:
    classify tail -> resolve tools -> print WHAT/WHY -> spawn -> child's exit code

Everything that can fail on the wrapper side (missing script file, missing
interpreter) fails before the preamble is printed.
"""

import argparse

from ..commands.base import BaseCommand
from ..core.gate import EXECUTION_COMMANDS, Rationale
from ..core.variants import classify
from ..presentation.announce import emit_preamble
from ..services.executor import build_child_spec, spawn


class ExecCommand(BaseCommand):
    """Execution-class commands: everything that spawns a child process."""

    def execute(self, command: str, tail, rationale: Rationale) -> int:
        variant = classify(command, tail, stdin=self._cli.stdin_bytes, i18n=self.i18n)
        spec = build_child_spec(variant, self.config, self.resolver, self.i18n)
        emit_preamble(rationale, self.config, self._cli.stdout)
        return spawn(spec, self.i18n).exit_code


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAMES = list(EXECUTION_COMMANDS)

_SCRIPT_EPILOG = "Arguments after the source (optionally after --) are passed to the script."


def _add_script_parser(subparsers, name: str, help_text: str):
    p = subparsers.add_parser(name, help=help_text, epilog=_SCRIPT_EPILOG)
    p.add_argument('-c', '--code', help='Inline code to execute')
    p.add_argument('-f', '--file', help='Script file to execute')
    p.add_argument('--stdin', action='store_true', help='Read the script from standard input')
    p.add_argument('args', nargs=argparse.REMAINDER, help='Script arguments')
    return p


def register_parser(subparsers):
    """Register execution-class parsers (help and completion only; tails are classified verbatim)."""
    p = subparsers.add_parser('run', help='Run a shell command')
    p.add_argument('command', nargs=argparse.REMAINDER, help='Command and arguments')

    _add_script_parser(subparsers, 'py', 'Run Python code')
    _add_script_parser(subparsers, 'node', 'Run Node.js code')

    for name, help_text in (
        ('pip', 'Run pip of the configured Python'),
        ('npm', 'Run npm next to the configured node'),
        ('npx', 'Run npx next to the configured node'),
        ('pueue', 'Run pueue (background task runner)'),
    ):
        p = subparsers.add_parser(name, help=help_text, add_help=False)
        p.add_argument('args', nargs=argparse.REMAINDER, help=f'Arguments passed to {name}')


def handle(cli, args):
    """Handle execution-class dispatch."""
    return cli._exec_cmd.execute(args.command, args.tail, args.rationale)
