# mermaid_pages/locate.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from .constants import LANGUAGE_DEFAULT

BuildFn = Callable[[str], str]


@dataclass(frozen=True)
class DiagramBlock:
    """One matched ``<pre><code>`` block plus its copy button."""

    escaped_source: str
    span: tuple[int, int]


@lru_cache(maxsize=None)
def block_pattern(language: str = LANGUAGE_DEFAULT) -> re.Pattern[str]:
    """Compile the pattern for a code block tagged ``language``.

    The generator emits ``<pre><code class="mermaid">...</code><button ...>Copy</button></pre>``.
    The code body is HTML-escaped, so it never contains ``<``; requiring that
    keeps an unterminated block from running into the next one.
    """
    lang = re.escape(language)
    return re.compile(
        rf'<pre><code class="(?:language-)?{lang}">([^<]*)</code>'
        r"<button\b[^>]*>[^<]*(?:<(?!/?(?:button|pre)\b)[^<]*)*</button></pre>"
    )


def find_blocks(html: str, language: str = LANGUAGE_DEFAULT) -> list[DiagramBlock]:
    """Return every diagram block in ``html`` in document order."""
    return [
        DiagramBlock(escaped_source=m.group(1), span=m.span())
        for m in block_pattern(language).finditer(html)
    ]


def transform_blocks(
    html: str, build: BuildFn, language: str = LANGUAGE_DEFAULT
) -> tuple[str, int]:
    """Replace each diagram block (copy button included) with ``build(source)``.

    Returns ``(new_html, replacements)``. Input without diagram blocks comes
    back unchanged.
    """
    return block_pattern(language).subn(lambda m: build(m.group(1)), html)
