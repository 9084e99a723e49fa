# mermaid_pages/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .assets import AssetResolutionError
from .config import load_settings_file, settings_from_mapping
from .constants import MODES, STRATEGIES
from .plugin import MermaidPagesPlugin, Page
from .validate import validate_settings
from .writer import iter_pages, read_page, write_page

CONFIG_FILENAME_DEFAULT = "mermaid-pages.yaml"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mermaid-pages",
        description=(
            "Turn Mermaid code blocks in generated HTML documentation into "
            "client-rendered, theme-aware diagrams."
        ),
    )
    parser.add_argument("out_dir", type=Path, help="Documentation output directory")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            f"YAML settings file (default: {CONFIG_FILENAME_DEFAULT} in the "
            "current directory, if present)"
        ),
    )
    parser.add_argument("--mode", choices=MODES, help="Load Mermaid from a CDN or a staged local copy")
    parser.add_argument("--remote-url", help="Override the Mermaid ESM URL used in remote mode")
    parser.add_argument("--mermaid-version", help="Mermaid version for the default CDN URL")
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        help=(
            "How diagram source is carried into the page: passthrough (single "
            "placeholder, re-rendered on theme change) or mermaid-entities "
            "(pre-themed dark/light copies)"
        ),
    )
    parser.add_argument("--dist-dir", help="Use this mermaid dist/ directory instead of searching node_modules")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on settings warnings (e.g., unknown keys). Errors always fail.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every rewritten page")
    return parser


def _load_settings_data(config: Optional[Path]) -> dict[str, Any]:
    if config is not None:
        return load_settings_file(config)

    default = Path.cwd() / CONFIG_FILENAME_DEFAULT
    if default.exists():
        return load_settings_file(default)
    return {}


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        data = _load_settings_data(args.config)
    except (FileNotFoundError, TypeError, ValueError) as e:
        print(f"error: cannot load settings: {e}", file=sys.stderr)
        raise SystemExit(2)

    overrides = {
        "mode": args.mode,
        "remote_url": args.remote_url,
        "mermaid_version": args.mermaid_version,
        "strategy": args.strategy,
        "dist_dir": args.dist_dir,
    }
    effective = dict(data)
    effective.update({k: v for k, v in overrides.items() if v is not None})

    errors, warnings = validate_settings(effective)
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    out_dir: Path = args.out_dir
    if not out_dir.is_dir():
        print(f"error: output directory not found: {out_dir}", file=sys.stderr)
        raise SystemExit(2)

    plugin = MermaidPagesPlugin(settings_from_mapping(effective))

    try:
        plugin.on_render_begin()
    except AssetResolutionError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    processed = 0
    for url, path in iter_pages(out_dir):
        original = read_page(path)
        page = Page(url=url, contents=original)
        plugin.on_page_end(page)
        processed += 1
        if page.contents is not None and page.contents != original:
            write_page(path, page.contents)

    plugin.on_render_end(out_dir)
    print(f"processed {processed} page(s), rewrote {plugin.context.pages_modified}")


if __name__ == "__main__":
    main()
