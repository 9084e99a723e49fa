# mermaid_pages/config.py
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .assets import relative_asset_path
from .constants import (
    ASSETS_DIR_DEFAULT,
    LANGUAGE_DEFAULT,
    MERMAID_VERSION_DEFAULT,
    MODE_DEFAULT,
    MODES,
    STRATEGIES,
    STRATEGY_DEFAULT,
    remote_url_for,
)

SETTINGS_SECTION = "mermaid"


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, fixed for the lifetime of a render."""

    mode: str = MODE_DEFAULT
    remote_url: Optional[str] = None
    mermaid_version: str = MERMAID_VERSION_DEFAULT
    strategy: str = STRATEGY_DEFAULT
    language: str = LANGUAGE_DEFAULT
    assets_dir: str = ASSETS_DIR_DEFAULT
    search_paths: tuple[Path, ...] = ()
    dist_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"unknown mode {self.mode!r} (expected one of {', '.join(MODES)})")
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"unknown strategy {self.strategy!r} (expected one of {', '.join(STRATEGIES)})"
            )

    @property
    def effective_remote_url(self) -> str:
        return self.remote_url or remote_url_for(self.mermaid_version)

    @property
    def local(self) -> bool:
        return self.mode == "local"

    def resolved_search_paths(self) -> tuple[Path, ...]:
        """Directories to start the node_modules lookup from.

        Defaults to the working directory, then this package's directory, so a
        mermaid installed next to the docs project or next to this package is
        found.
        """
        if self.search_paths:
            return self.search_paths
        return (Path.cwd(), Path(__file__).resolve().parent)


@dataclass(frozen=True)
class PageRenderOptions:
    """What the markup builder needs to know about one page."""

    mode: str
    remote_url: str
    local_path: str
    strategy: str = STRATEGY_DEFAULT
    language: str = LANGUAGE_DEFAULT

    @property
    def import_url(self) -> str:
        return self.local_path if self.mode == "local" else self.remote_url

    @classmethod
    def for_page(cls, settings: Settings, page_url: str) -> "PageRenderOptions":
        return cls(
            mode=settings.mode,
            remote_url=settings.effective_remote_url,
            local_path=relative_asset_path(page_url, settings.assets_dir),
            strategy=settings.strategy,
            language=settings.language,
        )


def load_settings_file(path: Path) -> dict[str, Any]:
    """Load a YAML settings file.

    The file may either hold the settings at top level or under a
    ``mermaid:`` key (so the section can live in a larger docs config).
    """
    if not path.exists():
        raise FileNotFoundError(str(path))

    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    section = data.get(SETTINGS_SECTION)
    if isinstance(section, dict):
        return section
    return data


def _as_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def settings_from_mapping(data: dict[str, Any], **overrides: Any) -> Settings:
    """Build :class:`Settings` from a (validated) mapping plus CLI overrides.

    Overrides that are ``None`` are ignored. Unknown keys are ignored here;
    the validator reports them.
    """
    merged: dict[str, Any] = dict(data)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(Settings)}
    kwargs: dict[str, Any] = {}
    for key, value in merged.items():
        if key not in known or value is None:
            continue
        if key == "search_paths":
            kwargs[key] = tuple(p for p in (_as_path(v) for v in value) if p is not None)
        elif key == "dist_dir":
            kwargs[key] = _as_path(value)
        else:
            kwargs[key] = str(value)

    return Settings(**kwargs)
