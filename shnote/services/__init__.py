"""
Services — Integration with the host system

Contains integrations with external programs and files:
- Shell: shell detection and command-line building
- Resolver: interpreter and tool lookup
- Executor: child process spawn with full passthrough
- Agents: AI agent rule files
- Pueue: background task runner install/verify
"""

from .shell import ShellType, detect_shell, join_command, shell_argv
from .resolver import ToolResolver
from .executor import ChildSpec, ChildExit, Piped, INHERIT, NULL, build_child_spec, spawn, exit_status
from .agents import AgentType, Scope, install_rules, detect_tool, find_installed_rules
from .pueue import install_pueue, installed_binary, platform_assets

__all__ = [
    # Shell
    "ShellType", "detect_shell", "join_command", "shell_argv",
    # Resolver
    "ToolResolver",
    # Executor
    "ChildSpec", "ChildExit", "Piped", "INHERIT", "NULL", "build_child_spec", "spawn", "exit_status",
    # Agents
    "AgentType", "Scope", "install_rules", "detect_tool", "find_installed_rules",
    # Pueue
    "install_pueue", "installed_binary", "platform_assets",
]
