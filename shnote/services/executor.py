"""
Process Executor — Build the child invocation and run it with full passthrough

The child inherits stdin/stdout/stderr file descriptors directly; nothing is
copied through this process. The only exception is PyStdin/NodeStdin, whose
script text was already consumed from our stdin and is fed back as a pipe.

Exit status:
- normal exit       -> child's own code
- killed by signal  -> 128 + signal number (POSIX)
- Windows           -> raw exit status

Interrupts: the child shares our process group / console, so Ctrl-C reaches
it directly. While waiting, this process ignores SIGINT/SIGQUIT (POSIX) or
swallows KeyboardInterrupt (Windows) so that it never exits before the
child and the child's status is what propagates.
"""

import contextlib
import logging
import os
import signal
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from ..config import Config, shnote_bin_dir
from ..core.variants import (
    CommandVariant, NodeFile, NodeInline, NodeStdin, NpmPassthrough, NpxPassthrough,
    PipPassthrough, PueuePassthrough, PyFile, PyInline, PyStdin, Shell,
    STDIN_ENCODING, STDIN_ERRORS,
)
from ..errors import SIGNAL_EXIT_BASE, ChildSpawnFailed, ToolNotFound
from ..i18n import I18n
from .resolver import ToolResolver
from .shell import detect_shell, join_command, shell_argv

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

PYTHON_ENV = {"PYTHONUTF8": "1", "PYTHONIOENCODING": "utf-8"}


# =============================================================================
# ChildSpec
# =============================================================================

@dataclass(frozen=True)
class Inherit:
    pass


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Piped:
    data: bytes


StdinSource = Union[Inherit, Null, Piped]
INHERIT = Inherit()
NULL = Null()


@dataclass(frozen=True)
class ChildSpec:
    program: str
    args: Tuple[str, ...] = ()
    stdin_source: StdinSource = INHERIT
    env: Dict[str, str] = field(default_factory=dict)  # additions to the inherited environment

    @property
    def argv(self):
        return [self.program, *self.args]


@dataclass(frozen=True)
class ChildExit:
    """How the child ended. A signal is a result, never an exception."""
    returncode: int
    signal: Optional[int] = None

    @property
    def exit_code(self) -> int:
        if self.signal is not None:
            return SIGNAL_EXIT_BASE + self.signal
        return self.returncode


def exit_status(returncode: int, windows: bool = IS_WINDOWS) -> ChildExit:
    """Map a Popen returncode (negative = killed by signal on POSIX)."""
    if returncode < 0 and not windows:
        return ChildExit(returncode, signal=-returncode)
    return ChildExit(returncode)


def _wrap_windows_script(program: str, args: Tuple[str, ...]) -> Tuple[str, Tuple[str, ...]]:
    # npm.cmd / npx.cmd are batch files and need cmd.exe to run them
    if program.lower().endswith((".cmd", ".bat")):
        return "cmd", ("/C", program, *args)
    return program, args


def build_child_spec(variant: CommandVariant, config: Config,
                     resolver: Optional[ToolResolver] = None,
                     i18n: Optional[I18n] = None,
                     windows: bool = IS_WINDOWS) -> ChildSpec:
    """
    Derive the concrete invocation for `variant` from the loaded config.

    Raises:
        ToolNotFound: interpreter, shell or tool could not be resolved
    """
    i18n = i18n or I18n()
    resolver = resolver or ToolResolver(i18n, windows=windows)
    paths = config.paths

    if isinstance(variant, Shell):
        kind, program = detect_shell(paths.shell, windows=windows, which=resolver.which, i18n=i18n)
        argv = shell_argv(kind, program, join_command(variant.args, kind))
        spec = ChildSpec(argv[0], tuple(argv[1:]))

    elif isinstance(variant, PyInline):
        spec = ChildSpec(resolver.python(paths.python), ("-c", variant.code, *variant.args),
                         env=dict(PYTHON_ENV))
    elif isinstance(variant, PyFile):
        spec = ChildSpec(resolver.python(paths.python), (str(variant.path), *variant.args),
                         env=dict(PYTHON_ENV))
    elif isinstance(variant, PyStdin):
        spec = ChildSpec(resolver.python(paths.python), ("-", *variant.args),
                         stdin_source=Piped(variant.script.encode(STDIN_ENCODING, STDIN_ERRORS)),
                         env=dict(PYTHON_ENV))

    elif isinstance(variant, NodeInline):
        spec = ChildSpec(resolver.node(paths.node), ("-e", variant.code, *variant.args))
    elif isinstance(variant, NodeFile):
        spec = ChildSpec(resolver.node(paths.node), (str(variant.path), *variant.args))
    elif isinstance(variant, NodeStdin):
        spec = ChildSpec(resolver.node(paths.node), ("-", *variant.args),
                         stdin_source=Piped(variant.script.encode(STDIN_ENCODING, STDIN_ERRORS)))

    elif isinstance(variant, PipPassthrough):
        spec = ChildSpec(resolver.python(paths.python), ("-m", "pip", *variant.args),
                         env=dict(PYTHON_ENV))
    elif isinstance(variant, (NpmPassthrough, NpxPassthrough)):
        tool = "npm" if isinstance(variant, NpmPassthrough) else "npx"
        program, args = resolver.node_sibling(tool, paths.node), variant.args
        if windows:
            program, args = _wrap_windows_script(program, args)
        spec = ChildSpec(program, tuple(args))
    elif isinstance(variant, PueuePassthrough):
        spec = ChildSpec(resolver.in_dir_or_path("pueue", shnote_bin_dir()), variant.args)

    else:
        raise TypeError(f"not an execution variant: {variant!r}")

    logger.debug("child spec: %s", spec)
    return spec


# =============================================================================
# Spawn with full inheritance
# =============================================================================

@contextlib.contextmanager
def _ignore_interrupts():
    """system(3) semantics: the parent ignores SIGINT/SIGQUIT while waiting."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    saved = []
    for name in ("SIGINT", "SIGQUIT"):
        signum = getattr(signal, name, None)
        if signum is not None:
            saved.append((signum, signal.signal(signum, signal.SIG_IGN)))
    try:
        yield
    finally:
        for signum, handler in saved:
            signal.signal(signum, handler)


def _popen(spec: ChildSpec, i18n: I18n) -> subprocess.Popen:
    env = None
    if spec.env:
        env = dict(os.environ)
        for key, value in spec.env.items():
            env.setdefault(key, value)

    stdin = None
    if isinstance(spec.stdin_source, Piped):
        stdin = subprocess.PIPE
    elif isinstance(spec.stdin_source, Null):
        stdin = subprocess.DEVNULL

    # Preamble and any buffered output must land before the child's output
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        return subprocess.Popen(spec.argv, stdin=stdin, env=env)
    except FileNotFoundError as e:
        raise ToolNotFound(i18n.t("err_failed_to_execute", cmd=spec.program, reason=e.strerror),
                           spec.program) from e
    except OSError as e:
        raise ChildSpawnFailed(i18n.t("err_failed_to_execute", cmd=spec.program, reason=e.strerror or e),
                               spec.program) from e


def _feed_stdin(proc: subprocess.Popen, data: bytes) -> None:
    try:
        proc.stdin.write(data)
    except BrokenPipeError:
        # Child exited without reading everything; its status still decides
        pass
    finally:
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass


def _spawn_posix(spec: ChildSpec, i18n: I18n) -> int:
    proc = _popen(spec, i18n)
    with _ignore_interrupts():
        if isinstance(spec.stdin_source, Piped):
            _feed_stdin(proc, spec.stdin_source.data)
        return proc.wait()


def _spawn_windows(spec: ChildSpec, i18n: I18n) -> int:
    proc = _popen(spec, i18n)
    if isinstance(spec.stdin_source, Piped):
        _feed_stdin(proc, spec.stdin_source.data)
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            # Ctrl-C went to the whole console; wait for the child's verdict
            continue


def spawn(spec: ChildSpec, i18n: Optional[I18n] = None, windows: bool = IS_WINDOWS) -> ChildExit:
    """
    Run `spec` with inherited streams and wait for it.

    Raises:
        ToolNotFound: program vanished between resolution and spawn
        ChildSpawnFailed: permission denied, exec format error
    """
    i18n = i18n or I18n()
    logger.debug("spawning: %s", spec.argv)
    returncode = _spawn_windows(spec, i18n) if windows else _spawn_posix(spec, i18n)
    result = exit_status(returncode, windows=windows)
    if result.signal is not None:
        logger.info("child terminated by signal %d", result.signal)
    return result
