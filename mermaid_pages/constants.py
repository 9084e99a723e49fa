# mermaid_pages/constants.py
from __future__ import annotations

MERMAID_VERSION_DEFAULT = "11"
MERMAID_MIN_LOCAL_VERSION = "10.0.0"

# Distributable layout inside node_modules/mermaid/.
PACKAGE_NAME = "mermaid"
DIST_DIRNAME = "dist"
ENTRY_POINT = "mermaid.esm.min.mjs"
CHUNKS_DIR = "chunks/mermaid.esm.min"

ASSETS_DIR_DEFAULT = "assets/mermaid"
LANGUAGE_DEFAULT = "mermaid"

MODES: tuple[str, ...] = ("remote", "local")
MODE_DEFAULT = "remote"

STRATEGY_PASSTHROUGH = "passthrough"
STRATEGY_MERMAID_ENTITIES = "mermaid-entities"
STRATEGIES: tuple[str, ...] = (STRATEGY_PASSTHROUGH, STRATEGY_MERMAID_ENTITIES)
STRATEGY_DEFAULT = STRATEGY_PASSTHROUGH

BLOCK_CLASS = "mermaid-block"
BLOCK_START = f'<div class="{BLOCK_CLASS}">'
BLOCK_END = "</div>"

# Mermaid theme names keyed by site theme.
THEME_DARK = "dark"
THEME_LIGHT = "default"


def remote_url_for(version: str) -> str:
    """Return the CDN URL of Mermaid's ESM bundle for a version or range."""
    return f"https://unpkg.com/mermaid@{version}/{DIST_DIRNAME}/{ENTRY_POINT}"


REMOTE_URL_DEFAULT = remote_url_for(MERMAID_VERSION_DEFAULT)
