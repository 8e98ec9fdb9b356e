"""
Tool Resolution — Find interpreters and package managers before spawning

Order for every tool:
  1. Configured value (absolute path must exist; a bare name goes through PATH)
  2. PATH lookup of the default names
  3. ToolNotFound (reported before anything is printed or spawned)

pip runs as `<python> -m pip` so it always matches the resolved interpreter.
npm/npx are looked up next to the resolved node first, then on PATH.
pueue is looked up in ~/.shnote/bin first, then on PATH.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..errors import ToolNotFound
from ..i18n import I18n

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

PYTHON_FALLBACKS = ("python3", "python")
NODE_FALLBACKS = ("node",)


def _exe_names(name: str, windows: bool) -> List[str]:
    if not windows:
        return [name]
    return [f"{name}.exe", f"{name}.cmd", f"{name}.bat", name]


class ToolResolver:
    """
    Resolves tool names to executable paths.

    `which` is injectable so tests can simulate PATH without touching it.
    """

    def __init__(self, i18n: Optional[I18n] = None, which: Callable = shutil.which,
                 windows: bool = IS_WINDOWS):
        self.i18n = i18n or I18n()
        self._which = which
        self._windows = windows

    @property
    def which(self) -> Callable:
        return self._which

    def resolve(self, name: str, configured: Optional[str] = None,
                fallbacks: Sequence[str] = ()) -> str:
        """
        Raises:
            ToolNotFound: nothing resolved
        """
        if configured:
            path = Path(configured).expanduser()
            if path.is_absolute():
                if path.is_file():
                    logger.debug("resolved %s -> %s (configured)", name, path)
                    return str(path)
            else:
                found = self._which(configured)
                if found:
                    logger.debug("resolved %s -> %s (configured, PATH)", name, found)
                    return found

        for candidate in fallbacks:
            found = self._which(candidate)
            if found:
                logger.debug("resolved %s -> %s (PATH)", name, found)
                return found

        raise ToolNotFound(self.i18n.t("err_interpreter_not_found", name=configured or name), name)

    def python(self, configured: Optional[str] = None) -> str:
        return self.resolve("python", configured, PYTHON_FALLBACKS)

    def node(self, configured: Optional[str] = None) -> str:
        return self.resolve("node", configured, NODE_FALLBACKS)

    def node_sibling(self, tool: str, node_configured: Optional[str] = None) -> str:
        """npm/npx: next to node (nvm, volta layouts), else PATH."""
        try:
            node = self.node(node_configured)
        except ToolNotFound:
            node = None
        if node:
            dirs = [Path(node).parent, Path(node).resolve().parent]
            for node_dir in dict.fromkeys(dirs):
                for exe in _exe_names(tool, self._windows):
                    candidate = node_dir / exe
                    if candidate.is_file():
                        logger.debug("resolved %s -> %s (next to node)", tool, candidate)
                        return str(candidate)
        return self.resolve(tool, None, (tool,))

    def in_dir_or_path(self, tool: str, directory: Path) -> str:
        """pueue/pueued: installed copy first, else PATH."""
        for exe in _exe_names(tool, self._windows):
            candidate = Path(directory) / exe
            if candidate.is_file():
                logger.debug("resolved %s -> %s (installed)", tool, candidate)
                return str(candidate)
        return self.resolve(tool, None, (tool,))
