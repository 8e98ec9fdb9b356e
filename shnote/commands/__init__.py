"""
Commands — Modular CLI command implementations with self-registration

Each command module:
1. Defines XxxCommand class (handler implementation)
2. Exports register_parser(subparsers) to configure its argparse
3. Exports handle(cli, args) to dispatch to handler methods

Registry pattern enables:
- Locality: Parser definition next to implementation
- Open/Closed: Add command = add module to COMMAND_MODULES
"""

import importlib
import logging
from typing import Any, Callable, Dict

from .base import BaseCommand

logger = logging.getLogger(__name__)

# Command modules that participate in auto-registration
# Order determines help display order
COMMAND_MODULES = [
    # Execution
    'exec_cmd',
    # Management
    'config_cmd',
    'init_cmd',
    'setup_cmd',
    'doctor',
    'completions',
    'info',
    'update',
    'uninstall',
]

# Handler registry: command_name -> handle function
_handlers: Dict[str, Callable] = {}

# Subcommand parsers and their help, populated by register_all (used by completions)
_parsers: Dict[str, Any] = {}
_help: Dict[str, str] = {}


def register_all(subparsers) -> None:
    """
    Discover and register all command parsers.

    Imports each module in COMMAND_MODULES and calls its register_parser()
    function if it exists. Also registers the handle() function for dispatch.

    Args:
        subparsers: argparse subparsers object from main parser
    """
    _handlers.clear()
    _parsers.clear()
    _help.clear()

    for module_name in COMMAND_MODULES:
        try:
            module = importlib.import_module(f'.{module_name}', __package__)
        except ImportError as e:
            logger.warning("could not load command module '%s': %s", module_name, e)
            continue

        if hasattr(module, 'register_parser'):
            module.register_parser(subparsers)

        if hasattr(module, 'handle'):
            # Derive from module name: 'init_cmd' -> 'init'
            cmd_name = getattr(module, 'COMMAND_NAME', None) or module_name.replace('_cmd', '')
            for name in getattr(module, 'COMMAND_NAMES', [cmd_name]):
                _handlers[name] = module.handle

    _parsers.update(subparsers.choices)
    _help.update({action.dest: action.help or "" for action in subparsers._choices_actions})


def dispatch(command: str, cli: Any, args: Any) -> Any:
    """
    Dispatch command to its registered handler.

    Returns:
        Result from handler (exit code or None)

    Raises:
        KeyError: If command not registered
    """
    if command not in _handlers:
        raise KeyError(f"Unknown command: {command}. Available: {list(_handlers.keys())}")

    return _handlers[command](cli, args)


def get_registered_commands() -> list:
    """Get list of registered command names."""
    return list(_handlers.keys())


def get_subcommand_parsers() -> Dict[str, Any]:
    """Registered subcommand name -> its ArgumentParser."""
    return dict(_parsers)


def get_subcommand_help() -> Dict[str, str]:
    return dict(_help)


__all__ = ["BaseCommand", "register_all", "dispatch", "get_registered_commands",
           "get_subcommand_parsers", "get_subcommand_help"]
