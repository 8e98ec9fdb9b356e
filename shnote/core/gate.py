"""
Rationale Gate — WHAT/WHY must precede the subcommand

The argument vector is split at the first token that is neither a global
option nor a global option's value:

    shnote --what "list files" --why "inspect layout" run ls -la
    |------------ globals ------------------------| |sub| |tail|

Only globals count as rationale. A `--what` inside the tail belongs to
the child command, which is how the ordering guarantee keeps the rationale
visible in shell history and process lists ahead of the command itself.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..errors import MissingRationale, UnexpectedRationale, UnknownCommand, UsageError
from ..i18n import I18n

EXECUTION_COMMANDS = ("run", "py", "node", "pip", "npm", "npx", "pueue")
MANAGEMENT_COMMANDS = (
    "config", "init", "setup", "doctor", "completions", "info", "update", "uninstall",
)

# Global options taking a value, and value-less ones
VALUE_OPTIONS = ("--what", "--why", "--lang")
FLAG_OPTIONS = ("-h", "--help", "-V", "--version")
RATIONALE_OPTIONS = ("--what", "--why")


@dataclass(frozen=True)
class Rationale:
    what: str
    why: str


@dataclass
class SplitArgs:
    """Result of splitting argv at the subcommand token."""
    globals: List[str] = field(default_factory=list)
    options: dict = field(default_factory=dict)  # "--what" -> value (last wins)
    flags: List[str] = field(default_factory=list)  # value-less leading options
    command: Optional[str] = None
    tail: List[str] = field(default_factory=list)

    @property
    def lang(self) -> Optional[str]:
        return self.options.get("--lang")

    @property
    def wants_help(self) -> bool:
        return any(tok in FLAG_OPTIONS for tok in self.flags)

    def normalized_globals(self) -> List[str]:
        """Globals in `--opt=value` form, safe to hand to argparse."""
        return [f"{opt}={value}" for opt, value in self.options.items()] + self.flags


def is_execution_command(name: str) -> bool:
    return name in EXECUTION_COMMANDS


def _match_value_option(token: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (option, inline_value) for `--what` / `--what=x` forms."""
    for opt in VALUE_OPTIONS:
        if token == opt:
            return opt, None
        if token.startswith(opt + "="):
            return opt, token[len(opt) + 1:]
    return None, None


def split_argv(argv: Sequence[str], i18n: Optional[I18n] = None) -> SplitArgs:
    """
    Split argv (without program name) into globals, subcommand and tail.

    Raises:
        UsageError: a value option is last with no value
    """
    i18n = i18n or I18n()
    result = SplitArgs()
    i = 0
    while i < len(argv):
        token = argv[i]
        opt, inline = _match_value_option(token)
        if opt:
            if inline is None:
                if i + 1 >= len(argv):
                    raise UsageError(i18n.t("err_flag_needs_value", flag=opt))
                value = argv[i + 1]
                result.globals.extend([token, value])
                i += 2
            else:
                value = inline
                result.globals.append(token)
                i += 1
            result.options[opt] = value
            continue
        if token in FLAG_OPTIONS or (token.startswith("-") and token != "-"):
            # Unknown leading options are left for argparse to reject
            result.globals.append(token)
            result.flags.append(token)
            i += 1
            continue
        result.command = token
        result.tail = list(argv[i + 1:])
        break
    return result


def _rationale_in_tail(tail: Sequence[str]) -> List[str]:
    found = []
    for token in tail:
        opt, _ = _match_value_option(token)
        if opt in RATIONALE_OPTIONS and opt not in found:
            found.append(opt)
    return found


def check_rationale(split: SplitArgs, i18n: Optional[I18n] = None) -> Optional[Rationale]:
    """
    Enforce the rationale invariant for the resolved subcommand.

    Returns:
        Rationale for execution-class commands, None for management ones.

    Raises:
        UnknownCommand: subcommand is not recognised
        MissingRationale: execution-class without non-empty --what/--why before it
        UnexpectedRationale: management command with --what/--why anywhere
    """
    i18n = i18n or I18n()
    command = split.command
    if command is None:
        raise UsageError(i18n.t("err_no_command"))

    if command in MANAGEMENT_COMMANDS:
        if any(opt in split.options for opt in RATIONALE_OPTIONS) or _rationale_in_tail(split.tail):
            raise UnexpectedRationale(i18n.t("err_reject_root_meta"), command)
        return None

    if command not in EXECUTION_COMMANDS:
        available = ", ".join(EXECUTION_COMMANDS + MANAGEMENT_COMMANDS)
        raise UnknownCommand(i18n.t("err_unknown_command", cmd=command, available=available), command)

    missing = tuple(opt for opt in RATIONALE_OPTIONS if not (split.options.get(opt) or "").strip())
    if missing:
        misplaced = tuple(opt for opt in _rationale_in_tail(split.tail) if opt in missing)
        lines = [i18n.t("err_missing_what_why", cmd=command)]
        absent = tuple(opt for opt in missing if opt not in misplaced)
        if absent:
            lines.append(i18n.t("err_missing_flags", flags=", ".join(absent)))
        if misplaced:
            lines.append(i18n.t("err_misplaced_flags", flags=", ".join(misplaced)))
        raise MissingRationale("\n".join(lines), command, missing=absent, misplaced=misplaced)

    return Rationale(what=split.options["--what"], why=split.options["--why"])
