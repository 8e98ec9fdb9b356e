"""
Pueue — Locate and install the background task runner

`setup` fetches the pinned pueue/pueued release for this platform from
GitHub into ~/.shnote/bin and verifies each file against a pinned SHA-256
before it becomes visible under its final name.

GITHUB_PROXY, when set, is prefixed to every GitHub URL:
    GITHUB_PROXY=https://ghproxy.example -> https://ghproxy.example/https://github.com/...
"""

import hashlib
import logging
import os
import platform
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from ..config import shnote_bin_dir
from ..errors import SetupError
from ..i18n import I18n

logger = logging.getLogger(__name__)

PUEUE_VERSION = "4.0.1"
RELEASE_URL = f"https://github.com/Nukesor/pueue/releases/download/v{PUEUE_VERSION}/"
DOWNLOAD_TIMEOUT = 60
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Asset:
    filename: str
    sha256: str


@dataclass(frozen=True)
class PlatformAssets:
    target: str
    pueue: Asset
    pueued: Asset


# (system, machine) -> release assets
PLATFORM_ASSETS: Dict[Tuple[str, str], PlatformAssets] = {
    ("linux", "x86_64"): PlatformAssets(
        "x86_64-unknown-linux-musl",
        Asset("pueue-x86_64-unknown-linux-musl",
              "16aea6654b3915c6495bb2f456184fd7f3d418de3f74afb5eab04ae953cdfedf"),
        Asset("pueued-x86_64-unknown-linux-musl",
              "8a97b176f55929e37cda49577b28b66ea345151adf766b9d8efa8c9d81525a0b"),
    ),
    ("linux", "aarch64"): PlatformAssets(
        "aarch64-unknown-linux-musl",
        Asset("pueue-aarch64-unknown-linux-musl",
              "666af79b5a0246efa61a8589e51a190e3174bf80ad1c78b264204e7d312d43a9"),
        Asset("pueued-aarch64-unknown-linux-musl",
              "8d3811f2ad57ef72ed171f446f19676ef755e189286d1c31a1e478ed57465bdb"),
    ),
    ("darwin", "aarch64"): PlatformAssets(
        "aarch64-apple-darwin",
        Asset("pueue-aarch64-apple-darwin",
              "4306f593b6a6b6db9d641889e33fe3a2effa6423888b8f82391fa57951ef1a9b"),
        Asset("pueued-aarch64-apple-darwin",
              "dc14a7873a4a474ae42e7a6ee5778c2af2d53049182ecaa2d061f4803f04bf23"),
    ),
    ("darwin", "x86_64"): PlatformAssets(
        "x86_64-apple-darwin",
        Asset("pueue-x86_64-apple-darwin",
              "25f07f7e93f916d6189acc11846aab6ebee975b0cc5867cf40a96b5c70f3b55c"),
        Asset("pueued-x86_64-apple-darwin",
              "3e50d3bfadd1e417c8561aed2c1f4371605e8002f7fd793f39045719af5436a8"),
    ),
    ("windows", "x86_64"): PlatformAssets(
        "x86_64-pc-windows-msvc",
        Asset("pueue-x86_64-pc-windows-msvc.exe",
              "1ac310e87cf2333a5852cecb9519c4b8f07ec0701c81aff3a82638dd0202c65c"),
        Asset("pueued-x86_64-pc-windows-msvc.exe",
              "de1274b4d369f31efa1df0a75eb810954666a87109f6a2594a1b777517740601"),
    ),
}

_MACHINE_ALIASES = {"amd64": "x86_64", "x64": "x86_64", "arm64": "aarch64"}


def current_platform() -> Tuple[str, str]:
    machine = platform.machine().lower()
    return platform.system().lower(), _MACHINE_ALIASES.get(machine, machine)


def platform_assets(key: Optional[Tuple[str, str]] = None,
                    i18n: Optional[I18n] = None) -> PlatformAssets:
    """
    Raises:
        SetupError: no prebuilt binaries for this platform
    """
    key = key or current_platform()
    assets = PLATFORM_ASSETS.get(key)
    if assets is None:
        raise SetupError((i18n or I18n()).t("err_unsupported_platform", platform="-".join(key)))
    return assets


def binary_name(tool: str) -> str:
    return f"{tool}.exe" if os.name == "nt" else tool


def installed_binary(tool: str, bin_dir: Optional[Path] = None) -> Optional[Path]:
    """Path of an installed pueue/pueued under ~/.shnote/bin, if present."""
    path = (bin_dir or shnote_bin_dir()) / binary_name(tool)
    return path if path.is_file() else None


def apply_github_proxy(url: str, proxy: Optional[str] = None) -> str:
    proxy = os.environ.get("GITHUB_PROXY") if proxy is None else proxy
    if not proxy:
        return url
    return f"{proxy.rstrip('/')}/{url}"


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def download_and_verify(url: str, dest: Path, expected_sha256: str,
                        i18n: Optional[I18n] = None,
                        opener: Callable = urllib.request.urlopen) -> Path:
    """
    Download `url` to `dest` through a temp file, verify, then rename.

    A checksum mismatch leaves no file behind.

    Raises:
        SetupError: network failure or checksum mismatch
    """
    i18n = i18n or I18n()
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=str(dest.parent))
    digest = hashlib.sha256()
    try:
        with os.fdopen(fd, "wb") as out:
            try:
                req = urllib.request.Request(url, headers={"User-Agent": "shnote"})
                with opener(req, timeout=DOWNLOAD_TIMEOUT) as response:
                    for chunk in iter(lambda: response.read(CHUNK_SIZE), b""):
                        digest.update(chunk)
                        out.write(chunk)
            except (urllib.error.URLError, OSError) as e:
                reason = getattr(e, "reason", None) or e
                raise SetupError(i18n.t("err_download_failed", url=url, reason=reason)) from e

        actual = digest.hexdigest()
        if expected_sha256 and actual != expected_sha256:
            raise SetupError(i18n.t("err_checksum_mismatch", path=dest,
                                    expected=expected_sha256, actual=actual))

        os.chmod(tmp_name, 0o755)
        os.replace(tmp_name, dest)
        tmp_name = None
        logger.info("installed %s (sha256 %s)", dest, actual)
        return dest
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def install_pueue(bin_dir: Optional[Path] = None, assets: Optional[PlatformAssets] = None,
                  i18n: Optional[I18n] = None, opener: Callable = urllib.request.urlopen,
                  report: Callable[[str], None] = print) -> Dict[str, Path]:
    """
    Download and verify pueue + pueued into `bin_dir`.

    Returns:
        {"pueue": path, "pueued": path}
    """
    i18n = i18n or I18n()
    bin_dir = bin_dir or shnote_bin_dir()
    assets = assets or platform_assets(i18n=i18n)
    try:
        bin_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"{i18n.t('err_create_dir', path=bin_dir)}: {e}") from e

    installed = {}
    for tool, asset in (("pueue", assets.pueue), ("pueued", assets.pueued)):
        url = apply_github_proxy(RELEASE_URL + asset.filename)
        report(f"  {tool} <- {url}")
        installed[tool] = download_and_verify(url, bin_dir / binary_name(tool), asset.sha256,
                                              i18n=i18n, opener=opener)
    return installed
