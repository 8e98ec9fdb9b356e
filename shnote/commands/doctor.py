"""
DoctorCommand — Check that every tool shnote may launch is available

One line per check:
    ✓ python: /usr/bin/python3 (Python 3.12.1)
    ✗ pueue: not found (run `shnote setup` to install)
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..commands.base import BaseCommand
from ..config import shnote_bin_dir
from ..errors import ToolNotFound
from ..services.shell import detect_shell

VERSION_TIMEOUT = 10


@dataclass
class CheckResult:
    name: str
    ok: bool
    path: Optional[str] = None
    version: Optional[str] = None
    error: Optional[str] = None


def tool_version(path: str, flag: str = "--version") -> Optional[str]:
    """First line of `<path> --version`, or None."""
    try:
        result = subprocess.run([path, flag], capture_output=True, text=True,
                                timeout=VERSION_TIMEOUT, check=False)
    except (OSError, subprocess.SubprocessError):
        return None
    output = (result.stdout or result.stderr or "").strip()
    return output.splitlines()[0] if output else None


class DoctorCommand(BaseCommand):
    """Command for environment diagnostics."""

    def _check(self, name: str, resolve, missing_key: str = "doctor_not_found_in_path") -> CheckResult:
        try:
            path = resolve()
        except ToolNotFound:
            return CheckResult(name, False, error=self.i18n.t(missing_key))
        return CheckResult(name, True, path=path, version=tool_version(path))

    def _check_shell(self) -> CheckResult:
        try:
            kind, path = detect_shell(self.config.paths.shell, which=self.resolver.which, i18n=self.i18n)
        except ToolNotFound as e:
            return CheckResult("shell", False, error=str(e))
        # cmd.exe has no --version
        version = None if kind.value == "cmd" else tool_version(path)
        return CheckResult(f"shell ({kind.value})", True, path=path, version=version)

    def run_checks(self) -> List[CheckResult]:
        paths = self.config.paths
        bin_dir = shnote_bin_dir()
        return [
            self._check("python", lambda: self.resolver.python(paths.python)),
            self._check("node", lambda: self.resolver.node(paths.node)),
            self._check_shell(),
            self._check("pueue", lambda: self.resolver.in_dir_or_path("pueue", bin_dir),
                        "doctor_pueue_not_found"),
            self._check("pueued", lambda: self.resolver.in_dir_or_path("pueued", bin_dir),
                        "doctor_pueue_not_found"),
        ]

    def doctor(self) -> int:
        symbols = self.symbols
        results = self.run_checks()
        for result in results:
            if result.ok:
                version = f" ({result.version})" if result.version else ""
                self.out(f"{symbols.check_pass} {result.name}: {result.path}{version}")
            else:
                self.out(f"{symbols.check_fail} {result.name}: {result.error}")

        self.out()
        all_ok = all(r.ok for r in results)
        self.out(self.i18n.t("doctor_all_ok" if all_ok else "doctor_has_issues"))
        return 0 if all_ok else 1


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'doctor'


def register_parser(subparsers):
    """Register doctor command parser."""
    return subparsers.add_parser('doctor', help='Check python, node, shell and pueue availability')


def handle(cli, args):
    """Handle doctor command dispatch."""
    return cli._doctor_cmd.doctor()
