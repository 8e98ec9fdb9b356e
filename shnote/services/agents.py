"""
Agent Rules — Install the shnote rules into AI agent instruction files

Supports multiple agents with their specific conventions:
- Claude Code >= 2.0.64: <base>/.claude/rules/shnote.md (file owned by shnote)
- Claude Code older:     marked block in <base>/.claude/CLAUDE.md
- Codex:                 marked block in ~/.codex/AGENTS.md or ./AGENTS.md
- Gemini:                marked block in ~/.gemini/GEMINI.md or ./GEMINI.md

<base> is the home directory for user scope and the working directory for
project scope. An undetectable Claude version gets the rules directory,
which is where current releases look.
"""

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config import home_dir
from ..core.blocks import (
    MARKDOWN, MarkedBlock, MergeAction, MergeResult,
    apply_block, extract_body, overwrite_file, read_text, remove_block, remove_text,
)
from ..i18n import I18n

logger = logging.getLogger(__name__)

RULES_BLOCK_ID = "rules"
CLAUDE_RULES_MIN_VERSION = (2, 0, 64)
VERSION_TIMEOUT = 10

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


class AgentType(Enum):
    """Known AI agents with their instruction-file conventions."""
    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"


class Scope(Enum):
    USER = "user"
    PROJECT = "project"

    @classmethod
    def from_arg(cls, value: str) -> 'Scope':
        return {"u": cls.USER, "user": cls.USER, "p": cls.PROJECT, "project": cls.PROJECT}[value]


# Agent -> (user-scope path under home, project-scope path under cwd)
SHARED_FILES = {
    AgentType.CLAUDE: (Path(".claude") / "CLAUDE.md", Path(".claude") / "CLAUDE.md"),
    AgentType.CODEX: (Path(".codex") / "AGENTS.md", Path("AGENTS.md")),
    AgentType.GEMINI: (Path(".gemini") / "GEMINI.md", Path("GEMINI.md")),
}
CLAUDE_RULES_FILE = Path(".claude") / "rules" / "shnote.md"


@dataclass(frozen=True)
class ToolInfo:
    """An agent CLI found on PATH."""
    path: str
    version: Optional[str] = None  # raw `--version` output, first line


@dataclass(frozen=True)
class InstallReport:
    path: Path
    result: MergeResult
    cleaned: Optional[Path] = None  # shared file a stale block was removed from


def scope_base(scope: Scope, cwd: Optional[Path] = None) -> Path:
    if scope is Scope.USER:
        return home_dir()
    return Path(cwd) if cwd else Path.cwd()


def shared_file(agent: AgentType, scope: Scope, cwd: Optional[Path] = None) -> Path:
    user_rel, project_rel = SHARED_FILES[agent]
    return scope_base(scope, cwd) / (user_rel if scope is Scope.USER else project_rel)


def claude_rules_file(scope: Scope, cwd: Optional[Path] = None) -> Path:
    return scope_base(scope, cwd) / CLAUDE_RULES_FILE


def parse_version(text: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """First N.N.N in `text`, e.g. "2.0.64 (Claude Code)" -> (2, 0, 64)."""
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    return tuple(int(part) for part in match.groups())


def detect_tool(name: str, which: Callable = shutil.which,
                run: Callable = subprocess.run) -> Optional[ToolInfo]:
    """Locate `name` on PATH and ask it for its version."""
    path = which(name)
    if not path:
        return None
    try:
        result = run([path, "--version"], capture_output=True, text=True,
                     timeout=VERSION_TIMEOUT, check=False)
    except (OSError, subprocess.SubprocessError) as e:
        logger.info("%s --version failed: %s", name, e)
        return ToolInfo(path)
    output = (result.stdout or result.stderr or "").strip()
    first_line = output.splitlines()[0] if output else None
    return ToolInfo(path, first_line)


def claude_uses_rules_dir(tool: Optional[ToolInfo]) -> bool:
    """Version gate: rules directory at/above the threshold or when unknown."""
    version = parse_version(tool.version) if tool else None
    use_dir = version is None or version >= CLAUDE_RULES_MIN_VERSION
    logger.info("claude version %s -> %s", version, "rules file" if use_dir else "CLAUDE.md block")
    return use_dir


def install_rules(agent: AgentType, scope: Scope, content: str,
                  tool: Optional[ToolInfo] = None, cwd: Optional[Path] = None,
                  i18n: Optional[I18n] = None) -> InstallReport:
    """
    Install `content` for `agent`.

    Args:
        tool: detected agent CLI (used for the Claude version gate)

    Raises:
        CorruptMarkedBlock: the target holds a damaged shnote block
    """
    i18n = i18n or I18n()
    shared = shared_file(agent, scope, cwd)

    if agent is AgentType.CLAUDE and claude_uses_rules_dir(tool):
        target = claude_rules_file(scope, cwd)
        # A damaged block in the shared file must fail before the rules file is written
        remove_text(read_text(shared, i18n), RULES_BLOCK_ID, MARKDOWN, path=shared, i18n=i18n)
        result = overwrite_file(target, content, i18n)
        removed = remove_block(shared, RULES_BLOCK_ID, MARKDOWN, i18n)
        cleaned = shared if removed.action is MergeAction.REMOVED else None
        return InstallReport(target, result, cleaned)

    result = apply_block(MarkedBlock(shared, RULES_BLOCK_ID, content, MARKDOWN), i18n)
    return InstallReport(shared, result)


@dataclass(frozen=True)
class InstalledRules:
    """A file that currently carries shnote rules."""
    path: Path
    owned: bool          # whole file belongs to shnote
    body: str


def find_installed_rules(cwd: Optional[Path] = None,
                         i18n: Optional[I18n] = None) -> List[InstalledRules]:
    """All rule files (both scopes, every agent) that contain shnote rules."""
    i18n = i18n or I18n()
    found = []
    seen = set()
    for scope in (Scope.USER, Scope.PROJECT):
        owned = claude_rules_file(scope, cwd)
        if owned.is_file() and owned not in seen:
            seen.add(owned)
            found.append(InstalledRules(owned, True, read_text(owned, i18n)))
        for agent in AgentType:
            path = shared_file(agent, scope, cwd)
            if path in seen or not path.is_file():
                continue
            seen.add(path)
            body = extract_body(read_text(path, i18n), RULES_BLOCK_ID, MARKDOWN, path=path, i18n=i18n)
            if body is not None:
                found.append(InstalledRules(path, False, body))
    return found


def is_outdated(installed: InstalledRules, content: str) -> bool:
    expected = content if installed.owned else "".join(line + "\n" for line in content.splitlines())
    return installed.body.replace("\r\n", "\n") != expected


def refresh_rules(installed: InstalledRules, content: str,
                  i18n: Optional[I18n] = None) -> MergeResult:
    if installed.owned:
        return overwrite_file(installed.path, content, i18n)
    return apply_block(MarkedBlock(installed.path, RULES_BLOCK_ID, content, MARKDOWN), i18n)


def remove_rules(installed: InstalledRules, i18n: Optional[I18n] = None) -> MergeResult:
    if installed.owned:
        installed.path.unlink()
        logger.info("deleted %s", installed.path)
        return MergeResult(installed.path, MergeAction.REMOVED)
    return remove_block(installed.path, RULES_BLOCK_ID, MARKDOWN, i18n)
