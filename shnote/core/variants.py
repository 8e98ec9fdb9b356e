"""
Command Classifier — Map an execution subcommand and its tail to one variant

Each variant is a frozen dataclass carrying exactly what it needs:

    Shell(args)                    run ls -la
    PyInline(code, args)           py -c "print(1)" a b
    PyFile(path, args)             py -f script.py -- a b
    PyStdin(script, args)          py --stdin <<'EOF' ... EOF
    NodeInline / NodeFile / NodeStdin
    PipPassthrough(args)           pip install requests
    NpmPassthrough / NpxPassthrough / PueuePassthrough

Management commands are parsed by argparse and classified as NonExecution.

No validation of the command content happens here: code, scripts and
package-manager arguments are forwarded untouched.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Tuple, Union

from ..errors import FileNotFound, ScriptSourceRequired, ShnoteError, UnknownCommand, UsageError
from ..i18n import I18n

# Lossless decoding of captured stdin; the executor re-encodes the same way
STDIN_ENCODING = "utf-8"
STDIN_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class Shell:
    args: Tuple[str, ...]


@dataclass(frozen=True)
class PyInline:
    code: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PyFile:
    path: Path
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PyStdin:
    script: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NodeInline:
    code: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NodeFile:
    path: Path
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NodeStdin:
    script: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PipPassthrough:
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NpmPassthrough:
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NpxPassthrough:
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PueuePassthrough:
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NonExecution:
    """config/init/setup/doctor/completions/info/update/uninstall"""
    command: str


CommandVariant = Union[
    Shell,
    PyInline, PyFile, PyStdin,
    NodeInline, NodeFile, NodeStdin,
    PipPassthrough, NpmPassthrough, NpxPassthrough, PueuePassthrough,
    NonExecution,
]

PYTHON_VARIANTS = (PyInline, PyFile, PyStdin)
NODE_VARIANTS = (NodeInline, NodeFile, NodeStdin)
STDIN_VARIANTS = (PyStdin, NodeStdin)

_PASSTHROUGH = {
    "pip": PipPassthrough,
    "npm": NpmPassthrough,
    "npx": NpxPassthrough,
    "pueue": PueuePassthrough,
}

_SCRIPT_SHAPES = {
    "py": (PyInline, PyFile, PyStdin),
    "node": (NodeInline, NodeFile, NodeStdin),
}


@dataclass
class _ScriptSource:
    code: Optional[str] = None
    file: Optional[str] = None
    stdin: bool = False
    count: int = 0


def _parse_script_tail(tail: Sequence[str], i18n: I18n) -> Tuple[_ScriptSource, Tuple[str, ...]]:
    """
    Consume leading -c/--code, -f/--file, --stdin options.

    Scanning stops at `--` (dropped) or the first other token; everything
    from there on is a script argument.
    """
    source = _ScriptSource()
    i = 0
    while i < len(tail):
        token = tail[i]
        if token == "--":
            i += 1
            break
        if token == "--stdin":
            source.stdin = True
            source.count += 1
            i += 1
            continue

        name, value = None, None
        if token in ("-c", "--code", "-f", "--file"):
            if i + 1 >= len(tail):
                raise UsageError(i18n.t("err_flag_needs_value", flag=token))
            name, value = token, tail[i + 1]
            i += 2
        elif token.startswith(("--code=", "--file=")):
            name, value = token.split("=", 1)
            i += 1
        else:
            break

        if name in ("-c", "--code"):
            source.code = value
        else:
            source.file = value
        source.count += 1

    return source, tuple(tail[i:])


def read_stdin_script(stdin: Optional[BinaryIO] = None, i18n: Optional[I18n] = None) -> str:
    """Read the whole input stream as program text."""
    i18n = i18n or I18n()
    stream = stdin if stdin is not None else sys.stdin.buffer
    try:
        data = stream.read()
    except (OSError, ValueError) as e:
        raise ShnoteError(f"{i18n.t('err_read_stdin')}: {e}") from e
    if isinstance(data, str):
        return data
    return data.decode(STDIN_ENCODING, STDIN_ERRORS)


def _classify_script(command: str, tail: Sequence[str], stdin, i18n: I18n) -> CommandVariant:
    inline_cls, file_cls, stdin_cls = _SCRIPT_SHAPES[command]
    source, args = _parse_script_tail(tail, i18n)

    if source.count != 1:
        raise ScriptSourceRequired(i18n.t("err_script_source_required"))

    if source.code is not None:
        return inline_cls(code=source.code, args=args)

    if source.file is not None:
        path = Path(source.file)
        if not (path.is_file() and os.access(path, os.R_OK)):
            raise FileNotFound(i18n.t("err_script_file_not_found", path=source.file), source.file)
        return file_cls(path=path, args=args)

    return stdin_cls(script=read_stdin_script(stdin, i18n), args=args)


def classify(command: str, tail: Sequence[str], stdin: Optional[BinaryIO] = None,
             i18n: Optional[I18n] = None) -> CommandVariant:
    """
    Build the variant for an execution-class subcommand.

    Args:
        command: subcommand token (run, py, node, pip, npm, npx, pueue)
        tail: tokens after the subcommand, unmodified
        stdin: binary stream read by --stdin variants (default: sys.stdin.buffer)

    Raises:
        UnknownCommand: command is not execution-class
        UsageError: `run` without a command, option missing its value
        ScriptSourceRequired: py/node without exactly one source
        FileNotFound: -f path missing or unreadable
    """
    i18n = i18n or I18n()
    tail = list(tail)

    if command == "run":
        if tail and tail[0] == "--":
            tail = tail[1:]
        if not tail:
            raise UsageError(i18n.t("err_run_needs_command"))
        return Shell(args=tuple(tail))

    if command in _SCRIPT_SHAPES:
        return _classify_script(command, tail, stdin, i18n)

    if command in _PASSTHROUGH:
        return _PASSTHROUGH[command](args=tuple(tail))

    raise UnknownCommand(i18n.t("err_unknown_command", cmd=command,
                                available=", ".join(["run", "py", "node"] + list(_PASSTHROUGH))),
                         command)
