"""
Shell Detection — Pick the shell for `run` and build its command line

The configured `shell` value wins; `auto` infers the platform default:
- Unix: $SHELL when it names a known shell, then zsh, bash, sh on PATH
- Windows: pwsh, powershell, cmd on PATH
"""

import os
import shlex
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..errors import ToolNotFound
from ..i18n import I18n

IS_WINDOWS = os.name == "nt"


class ShellType(Enum):
    SH = "sh"
    BASH = "bash"
    ZSH = "zsh"
    PWSH = "pwsh"
    POWERSHELL = "powershell"
    CMD = "cmd"

    @classmethod
    def from_program(cls, program: str) -> Optional['ShellType']:
        """Infer the type from an executable path such as /usr/bin/zsh or pwsh.exe."""
        name = Path(program).name.lower()
        if name.endswith(".exe"):
            name = name[:-4]
        for member in cls:
            if member.value == name:
                return member
        return None

    @property
    def is_posix(self) -> bool:
        return self in (ShellType.SH, ShellType.BASH, ShellType.ZSH)


UNIX_CANDIDATES = ("zsh", "bash", "sh")
WINDOWS_CANDIDATES = ("pwsh", "powershell", "cmd")


def detect_shell(configured: str = "auto", environ=None, which=shutil.which,
                 windows: bool = IS_WINDOWS, i18n: Optional[I18n] = None) -> Tuple[ShellType, str]:
    """
    Resolve the shell to an executable path.

    Returns:
        (ShellType, program path)

    Raises:
        ToolNotFound: configured shell not on PATH, or no candidate found
    """
    i18n = i18n or I18n()
    environ = os.environ if environ is None else environ

    if configured and configured != "auto":
        found = which(configured)
        if not found:
            raise ToolNotFound(i18n.t("err_shell_not_in_path", name=configured), configured)
        # Hand-edited values outside the known set get the POSIX convention
        return ShellType.from_program(configured) or ShellType.SH, found

    if not windows:
        env_shell = environ.get("SHELL")
        if env_shell:
            kind = ShellType.from_program(env_shell)
            if kind is not None and kind.is_posix and os.path.isfile(env_shell):
                return kind, env_shell

    candidates = WINDOWS_CANDIDATES if windows else UNIX_CANDIDATES
    for name in candidates:
        found = which(name)
        if found:
            return ShellType(name), found

    key = "err_no_shell_windows" if windows else "err_no_shell_unix"
    raise ToolNotFound(i18n.t(key), candidates[-1])


def join_command(args: Sequence[str], shell: ShellType) -> str:
    """
    Turn `run` arguments into one command line.

    A single argument is taken as a complete script (`run "ls | wc -l"`).
    Several arguments are quoted so each reaches the command as one word.
    """
    if len(args) == 1:
        return args[0]
    if shell.is_posix:
        return shlex.join(args)
    return subprocess.list2cmdline(list(args))


def shell_argv(shell: ShellType, program: str, command_line: str) -> List[str]:
    """argv for `<shell> <run-flag> <command_line>` in the shell's own convention."""
    if shell.is_posix:
        return [program, "-c", command_line]
    if shell in (ShellType.PWSH, ShellType.POWERSHELL):
        return [program, "-NoProfile", "-Command", command_line]
    return [program, "/C", command_line]
