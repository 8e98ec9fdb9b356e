"""
Block Merge — Idempotent marked-block install/update inside user-owned files

A marked block is a region this tool owns inside a file someone else owns:

    <!-- shnote:rules start -->
    ...body...
    <!-- shnote:rules end -->

Guarantees:
- Content outside the marker pair is never touched (byte-identical,
  including line endings).
- Applying the same block twice yields the same bytes as applying it once.
- A begin marker without its end marker is fatal: no boundary is guessed.
- Every write goes to a temp file in the same directory and is renamed
  over the target, so readers see either the old or the new file.
"""

import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import CorruptMarkedBlock, ShnoteError
from ..i18n import I18n

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentStyle:
    """How markers are commented out in a given file format."""
    prefix: str
    suffix: str = ""


MARKDOWN = CommentStyle("<!-- ", " -->")
HASH = CommentStyle("# ")

_EOL = re.compile(r"\r?\n\Z")


def begin_marker(marker_id: str, style: CommentStyle = MARKDOWN) -> str:
    return f"{style.prefix}shnote:{marker_id} start{style.suffix}"


def end_marker(marker_id: str, style: CommentStyle = MARKDOWN) -> str:
    return f"{style.prefix}shnote:{marker_id} end{style.suffix}"


@dataclass(frozen=True)
class MarkedBlock:
    file_path: Path
    marker_id: str
    body: str
    style: CommentStyle = MARKDOWN


class MergeAction(Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ABSENT = "absent"


@dataclass(frozen=True)
class MergeResult:
    path: Path
    action: MergeAction

    @property
    def changed(self) -> bool:
        return self.action in (MergeAction.INSERTED, MergeAction.UPDATED, MergeAction.REMOVED)


# =============================================================================
# Pure text operations
# =============================================================================

def _newline_of(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n").strip()


def find_block(lines: List[str], marker_id: str, style: CommentStyle = MARKDOWN,
               path=None, i18n: Optional[I18n] = None) -> Optional[Tuple[int, int]]:
    """
    Locate the (begin, end) line indices of a block, or None if absent.

    Raises CorruptMarkedBlock when the begin marker has no end marker after
    it, or when the begin marker occurs more than once.
    """
    i18n = i18n or I18n()
    begin, end = begin_marker(marker_id, style), end_marker(marker_id, style)

    starts = [i for i, line in enumerate(lines) if _strip_eol(line) == begin]
    if not starts:
        return None
    if len(starts) > 1:
        raise CorruptMarkedBlock(
            i18n.t("err_duplicate_block", path=path, marker=marker_id), path, marker_id)

    start = starts[0]
    for i in range(start + 1, len(lines)):
        if _strip_eol(lines[i]) == end:
            return start, i
    raise CorruptMarkedBlock(
        i18n.t("err_corrupt_block", path=path, marker=marker_id), path, marker_id)


def split_lines(content: str) -> List[str]:
    """Split on LF only, keeping line ends; CR and other separators stay in the line."""
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _body_lines(body: str, newline: str) -> List[str]:
    return [_EOL.sub("", line) + newline for line in split_lines(body)]


def merge_text(content: str, block: MarkedBlock, i18n: Optional[I18n] = None) -> str:
    """Return `content` with `block` inserted or its body replaced."""
    newline = _newline_of(content)
    lines = split_lines(content)
    span = find_block(lines, block.marker_id, block.style, path=block.file_path, i18n=i18n)
    body = _body_lines(block.body, newline)

    if span is not None:
        start, end = span
        return "".join(lines[:start + 1] + body + lines[end:])

    prefix = content
    if prefix:
        if not prefix.endswith(newline):
            prefix += newline
        if not prefix.endswith(newline * 2):
            prefix += newline
    rendered = [begin_marker(block.marker_id, block.style) + newline]
    rendered += body
    rendered.append(end_marker(block.marker_id, block.style) + newline)
    return prefix + "".join(rendered)


def remove_text(content: str, marker_id: str, style: CommentStyle = MARKDOWN,
                path=None, i18n: Optional[I18n] = None) -> str:
    """Return `content` without the block (markers included)."""
    newline = _newline_of(content)
    lines = split_lines(content)
    span = find_block(lines, marker_id, style, path=path, i18n=i18n)
    if span is None:
        return content

    start, end = span
    before = "".join(lines[:start])
    after = "".join(lines[end + 1:])
    if not after and before.endswith(newline * 2):
        # Undo the blank separator that merge_text adds when appending
        before = before[:-len(newline)]
    if not after and not before.strip():
        return ""
    return before + after


def extract_body(content: str, marker_id: str, style: CommentStyle = MARKDOWN,
                 path=None, i18n: Optional[I18n] = None) -> Optional[str]:
    lines = split_lines(content)
    span = find_block(lines, marker_id, style, path=path, i18n=i18n)
    if span is None:
        return None
    start, end = span
    return "".join(line.rstrip("\r\n") + "\n" for line in lines[start + 1:end])


# =============================================================================
# File operations
# =============================================================================

def read_text(path: Path, i18n: Optional[I18n] = None) -> str:
    """Read a file exactly as stored (no newline translation); missing -> ""."""
    path = Path(path)
    if not path.exists():
        return ""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ShnoteError(f"{(i18n or I18n()).t('err_read_file', path=path)}: {e}") from e


def atomic_write(path: Path, content: str, i18n: Optional[I18n] = None) -> None:
    """
    Replace `path` with `content` via temp file + rename.

    Parent directories are created. Existing permission bits are kept.
    A symlinked target is written through: the link stays, its file changes.
    """
    path = Path(os.path.realpath(path))
    i18n = i18n or I18n()
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ShnoteError(f"{i18n.t('err_write_file', path=path)}: {e}") from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def apply_block(block: MarkedBlock, i18n: Optional[I18n] = None) -> MergeResult:
    """Install or update `block` in its file. No write happens if nothing changed."""
    path = Path(block.file_path)
    original = read_text(path, i18n)
    existed = path.exists()
    had_block = find_block(split_lines(original), block.marker_id,
                           block.style, path=path, i18n=i18n) is not None
    updated = merge_text(original, block, i18n)

    if existed and updated == original:
        action = MergeAction.UNCHANGED
    else:
        atomic_write(path, updated, i18n)
        action = MergeAction.UPDATED if had_block else MergeAction.INSERTED

    logger.info("block %s in %s: %s", block.marker_id, path, action.value)
    return MergeResult(path, action)


def remove_block(path: Path, marker_id: str, style: CommentStyle = MARKDOWN,
                 i18n: Optional[I18n] = None) -> MergeResult:
    path = Path(path)
    if not path.exists():
        return MergeResult(path, MergeAction.ABSENT)
    original = read_text(path, i18n)
    updated = remove_text(original, marker_id, style, path=path, i18n=i18n)
    if updated == original:
        return MergeResult(path, MergeAction.ABSENT)
    atomic_write(path, updated, i18n)
    logger.info("block %s removed from %s", marker_id, path)
    return MergeResult(path, MergeAction.REMOVED)


def overwrite_file(path: Path, content: str, i18n: Optional[I18n] = None) -> MergeResult:
    """Whole-file ownership mode: the file is replaced wholesale."""
    path = Path(path)
    if path.exists():
        if read_text(path, i18n) == content:
            return MergeResult(path, MergeAction.UNCHANGED)
        action = MergeAction.UPDATED
    else:
        action = MergeAction.INSERTED
    atomic_write(path, content, i18n)
    logger.info("overwrote %s: %s", path, action.value)
    return MergeResult(path, action)
