"""
Core — Rationale gate, command classification, marked-block merge

Pure logic with no process spawning; services build on top of it.
"""

from .gate import (
    Rationale, SplitArgs, split_argv, check_rationale, is_execution_command,
    EXECUTION_COMMANDS, MANAGEMENT_COMMANDS,
)
from .variants import (
    CommandVariant, classify,
    Shell, PyInline, PyFile, PyStdin, NodeInline, NodeFile, NodeStdin,
    PipPassthrough, NpmPassthrough, NpxPassthrough, PueuePassthrough, NonExecution,
)
from .blocks import (
    MarkedBlock, MergeAction, MergeResult, CommentStyle, MARKDOWN, HASH,
    apply_block, remove_block, overwrite_file, merge_text, remove_text,
)

__all__ = [
    # Gate
    "Rationale", "SplitArgs", "split_argv", "check_rationale", "is_execution_command",
    "EXECUTION_COMMANDS", "MANAGEMENT_COMMANDS",
    # Variants
    "CommandVariant", "classify",
    "Shell", "PyInline", "PyFile", "PyStdin", "NodeInline", "NodeFile", "NodeStdin",
    "PipPassthrough", "NpmPassthrough", "NpxPassthrough", "PueuePassthrough", "NonExecution",
    # Blocks
    "MarkedBlock", "MergeAction", "MergeResult", "CommentStyle", "MARKDOWN", "HASH",
    "apply_block", "remove_block", "overwrite_file", "merge_text", "remove_text",
]
