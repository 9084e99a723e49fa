"""Client-side, theme-aware Mermaid diagrams for generated documentation pages."""
from .assets import AssetResolution, AssetResolutionError, relative_asset_path, resolve_local_install
from .config import PageRenderOptions, Settings
from .markup import process_mermaid_page, to_mermaid_block
from .plugin import MermaidPagesPlugin, Page, RenderContext

__all__ = [
    "AssetResolution",
    "AssetResolutionError",
    "MermaidPagesPlugin",
    "Page",
    "PageRenderOptions",
    "RenderContext",
    "Settings",
    "process_mermaid_page",
    "relative_asset_path",
    "resolve_local_install",
    "to_mermaid_block",
]
