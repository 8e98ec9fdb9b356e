"""
ConfigCommand — Configuration management

Handles configuration operations:
- Listing all settings
- Reading and setting a single key
- Resetting to defaults
- Showing the config file location
"""

from ..commands.base import BaseCommand
from ..config import Config


class ConfigCommand(BaseCommand):
    """Command for configuration display and modification."""

    def list(self) -> int:
        config = self.config_manager.load()
        width = max(len(key) for key in Config.KEYS)
        for key, value in config.list():
            self.out(f"{key.ljust(width)} = {value}")
        return 0

    def get(self, key: str) -> int:
        self.out(self.config_manager.get(key))
        return 0

    def set(self, key: str, value: str) -> int:
        config = self.config_manager.set(key, value)
        self.out(self.i18n.t("config_updated", key=key, value=config.get(key)))
        return 0

    def reset(self) -> int:
        self.config_manager.reset()
        self.out(self.i18n.t("config_reset_done"))
        return 0

    def path(self) -> int:
        self.out(str(self.config_manager.path))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'config'


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or change configuration')
    actions = p.add_subparsers(dest='action', metavar='{list,get,set,reset,path}')
    actions.required = True

    actions.add_parser('list', help='Show all settings')
    g = actions.add_parser('get', help='Show one setting')
    g.add_argument('key', metavar='KEY', help=', '.join(Config.KEYS))
    s = actions.add_parser('set', help='Change one setting')
    s.add_argument('key', metavar='KEY', help=', '.join(Config.KEYS))
    s.add_argument('value', metavar='VALUE')
    actions.add_parser('reset', help='Restore defaults')
    actions.add_parser('path', help='Show the config file path')
    return p


def handle(cli, args):
    """Handle config subcommand dispatch."""
    cmd = cli._config_cmd
    if args.action == 'list':
        return cmd.list()
    if args.action == 'get':
        return cmd.get(args.key)
    if args.action == 'set':
        return cmd.set(args.key, args.value)
    if args.action == 'reset':
        return cmd.reset()
    return cmd.path()
