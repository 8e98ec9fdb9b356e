"""
Presentation — Display layer for shnote

Contains display and formatting:
- Announce: WHAT/WHY preamble
- Symbols: status markers (unicode/ascii), safe printing
"""

from .announce import emit_preamble, render_preamble
from .symbols import SymbolSet, get_symbols, safe_print

__all__ = [
    # Announce
    "emit_preamble", "render_preamble",
    # Symbols
    "SymbolSet", "get_symbols", "safe_print",
]
