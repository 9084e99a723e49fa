# mermaid_pages/plugin.py
"""Render-lifecycle glue: begin -> one call per page -> end."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .assets import AssetResolution, AssetResolutionError, copy_assets, resolve_local_install
from .config import PageRenderOptions, Settings
from .markup import process_mermaid_page

log = logging.getLogger("mermaid_pages")


@dataclass
class Page:
    """A rendered page: its output-relative URL and its HTML."""

    url: str
    contents: Optional[str]


@dataclass
class RenderContext:
    """State carried from render begin to render end; replaced every cycle."""

    needs_copy: bool = False
    resolution: Optional[AssetResolution] = None
    pages_modified: int = 0
    blocks_rewritten: int = 0


class MermaidPagesPlugin:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self.context = RenderContext()

    def on_render_begin(self) -> None:
        """Start a render cycle.

        In local mode Mermaid is resolved here, once, so a missing install
        stops the build before any page is written.
        """
        self.context = RenderContext()
        if not self.settings.local:
            return

        resolution = resolve_local_install(
            self.settings.resolved_search_paths(), dist_dir=self.settings.dist_dir
        )
        self.context.resolution = resolution
        if not resolution.ok:
            raise AssetResolutionError(resolution.message)
        log.debug("using mermaid %s from %s", resolution.version or "(unknown version)", resolution.directory)

    def on_page_end(self, page: Page) -> None:
        if not page.contents:
            return

        options = PageRenderOptions.for_page(self.settings, page.url)
        contents, count = process_mermaid_page(page.contents, options)
        if not count:
            return

        page.contents = contents
        self.context.pages_modified += 1
        self.context.blocks_rewritten += count
        if self.settings.local:
            self.context.needs_copy = True
        log.debug("%s: rewrote %d mermaid block(s)", page.url, count)

    def on_render_end(self, output_dir: Path) -> bool:
        """Stage Mermaid assets when local mode rewrote at least one page.

        Returns ``False`` only when staging was needed and failed.
        """
        if not self.context.needs_copy:
            return True

        resolution = self.context.resolution
        if resolution is None or not resolution.ok:
            raise RuntimeError("on_render_end() called without a successful on_render_begin()")

        return copy_assets(resolution, output_dir, self.settings.assets_dir)
