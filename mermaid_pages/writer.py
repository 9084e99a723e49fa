from __future__ import annotations

from pathlib import Path
from typing import Iterator


def iter_pages(out_dir: Path) -> Iterator[tuple[str, Path]]:
    """Yield ``(url, path)`` for every HTML page under ``out_dir``, sorted.

    ``url`` is the POSIX path relative to ``out_dir``, as the generator would
    report it for the page.
    """
    for path in sorted(out_dir.rglob("*.html")):
        if path.is_file():
            yield path.relative_to(out_dir).as_posix(), path


def read_page(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_page(path: Path, contents: str) -> None:
    """Write a rendered page back in place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
