# mermaid_pages/assets.py
"""Locate Mermaid's distributable files and stage them into the docs output."""
from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .constants import (
    ASSETS_DIR_DEFAULT,
    CHUNKS_DIR,
    DIST_DIRNAME,
    ENTRY_POINT,
    MERMAID_MIN_LOCAL_VERSION,
    PACKAGE_NAME,
)

log = logging.getLogger("mermaid_pages.assets")


class AssetResolutionError(RuntimeError):
    """Local mode was selected but no usable Mermaid install was found."""


@dataclass(frozen=True)
class AssetResolution:
    ok: bool
    directory: Optional[Path] = None
    message: str = ""
    version: Optional[str] = None

    @classmethod
    def success(cls, directory: Path, version: Optional[str] = None) -> "AssetResolution":
        return cls(ok=True, directory=directory, version=version)

    @classmethod
    def failure(cls, message: str, version: Optional[str] = None) -> "AssetResolution":
        return cls(ok=False, message=message, version=version)


def _normalize_page_url(page_url: str) -> str:
    url = page_url.replace("\\", "/")
    while url.startswith("./"):
        url = url[2:]
    return url.lstrip("/")


def normalize_assets_dir(assets_dir: str) -> str:
    """Return ``assets_dir`` as a POSIX path relative to the output root.

    A leading ``/`` means "from the output root", so ``/static/js/`` becomes
    ``static/js``. Empty paths and ``..`` segments are rejected: the staged
    files must land inside the output directory.
    """
    parts = [p for p in assets_dir.replace("\\", "/").split("/") if p not in ("", ".")]
    if not parts:
        raise ValueError(f"assets_dir {assets_dir!r} is empty")
    if ".." in parts or ":" in parts[0]:
        raise ValueError(
            f"assets_dir {assets_dir!r} must be a relative path inside the output directory"
        )
    return "/".join(parts)


def relative_asset_path(page_url: str, assets_dir: str = ASSETS_DIR_DEFAULT) -> str:
    """Path from a page to the staged entry point.

    ``index.html`` -> ``./assets/mermaid/mermaid.esm.min.mjs``
    ``a/b.html``   -> ``../assets/mermaid/mermaid.esm.min.mjs``
    """
    depth = _normalize_page_url(page_url).count("/")
    prefix = "../" * depth if depth else "./"
    return f"{prefix}{normalize_assets_dir(assets_dir)}/{ENTRY_POINT}"


def _read_version(package_json: Path) -> Optional[str]:
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    version = data.get("version") if isinstance(data, dict) else None
    return version if isinstance(version, str) else None


def find_package_dir(search_from: Iterable[Path]) -> Optional[Path]:
    """Find ``node_modules/mermaid`` the way Node resolves a bare import.

    Each start directory and then each of its ancestors is checked for
    ``node_modules/mermaid/package.json``; the first hit wins.
    """
    seen: set[Path] = set()
    for start in search_from:
        start = Path(start).resolve()
        for directory in (start, *start.parents):
            if directory in seen:
                continue
            seen.add(directory)
            candidate = directory / "node_modules" / PACKAGE_NAME
            if (candidate / "package.json").is_file():
                return candidate
    return None


def check_dist_dir(dist_dir: Path, version: Optional[str] = None) -> AssetResolution:
    """Verify that ``dist_dir`` holds the ESM entry point."""
    if not (dist_dir / ENTRY_POINT).is_file():
        found = f"mermaid {version}" if version else "mermaid"
        return AssetResolution.failure(
            f"Found {found} at {dist_dir.parent}, but {DIST_DIRNAME}/{ENTRY_POINT} is missing. "
            f"Local mode requires mermaid >= {MERMAID_MIN_LOCAL_VERSION}; "
            "upgrade with `npm install mermaid@latest`.",
            version=version,
        )
    return AssetResolution.success(dist_dir, version=version)


def resolve_local_install(
    search_from: Iterable[Path], dist_dir: Optional[Path] = None
) -> AssetResolution:
    """Locate and verify Mermaid's ``dist`` directory for local mode."""
    if dist_dir is not None:
        dist_dir = Path(dist_dir).resolve()
        return check_dist_dir(dist_dir, _read_version(dist_dir.parent / "package.json"))

    package_dir = find_package_dir(search_from)
    if package_dir is None:
        return AssetResolution.failure(
            "Mermaid is not installed. Local asset mode needs the mermaid package: "
            "run `npm install mermaid` in your documentation project, "
            "or switch to mode: remote."
        )

    version = _read_version(package_dir / "package.json")
    return check_dist_dir(package_dir / DIST_DIRNAME, version)


def copy_assets(
    resolution: AssetResolution,
    output_dir: Path,
    assets_dir: str = ASSETS_DIR_DEFAULT,
) -> bool:
    """Copy the entry point and its chunk directory into ``output_dir``.

    Filesystem failures are logged and reported as ``False``; the pages are
    already written, only the diagrams will fail to load.
    """
    if not resolution.ok or resolution.directory is None:
        raise ValueError("copy_assets() requires a successful resolution")

    source = resolution.directory
    dest = Path(output_dir) / normalize_assets_dir(assets_dir)
    try:
        dest.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source / ENTRY_POINT, dest / ENTRY_POINT)
        chunks = source / CHUNKS_DIR
        if chunks.is_dir():
            shutil.copytree(chunks, dest / CHUNKS_DIR, dirs_exist_ok=True)
        else:
            log.warning("mermaid chunk directory %s not found; copied entry point only", chunks)
    except OSError as e:
        log.error("failed to copy mermaid assets to %s: %s", dest, e)
        return False

    log.info("staged mermaid assets in %s", dest)
    return True
