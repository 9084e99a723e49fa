# mermaid_pages/entities.py
"""Conversions between raw diagram source, HTML-escaped text and Mermaid text.

Three forms of the same source travel through a page:

- raw source, as the author wrote it (``A[List<int>] --> B``);
- HTML-escaped text, as the documentation generator emits it inside
  ``<pre><code>`` and as we write it into text nodes and attributes;
- Mermaid text, where Mermaid's own ``#lt;``-style markers stand in for
  characters that would otherwise be read as diagram syntax.

None of these functions are idempotent. Callers know which form they hold.
"""
from __future__ import annotations

import html
import json
from typing import Any

from .constants import STRATEGIES, STRATEGY_MERMAID_ENTITIES, STRATEGY_PASSTHROUGH

# Order matters: "&" first so references produced below are not re-escaped.
_HTML_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

_MERMAID_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "#amp;"),
    ("<", "#lt;"),
    (">", "#gt;"),
    ('"', "#quot;"),
)


def escape_html(raw: str) -> str:
    """Escape text for an HTML text node or a double-quoted attribute."""
    out = raw
    for char, ref in _HTML_ESCAPES:
        out = out.replace(char, ref)
    return out


def unescape_html(escaped: str) -> str:
    """Decode HTML character references the way a browser does."""
    return html.unescape(escaped)


def to_mermaid_entities(raw: str) -> str:
    """Replace Mermaid-significant characters with Mermaid's entity markers."""
    out = raw
    for char, marker in _MERMAID_ESCAPES:
        out = out.replace(char, marker)
    return out


def from_mermaid_entities(text: str) -> str:
    """Inverse of :func:`to_mermaid_entities`."""
    out = text
    # "#amp;" is decoded last.
    for char, marker in reversed(_MERMAID_ESCAPES):
        out = out.replace(marker, char)
    return out


def _require_strategy(strategy: str) -> str:
    if strategy not in STRATEGIES:
        raise ValueError(
            f"unknown entity strategy {strategy!r} (expected one of {', '.join(STRATEGIES)})"
        )
    return strategy


def encode_source(raw: str, strategy: str = STRATEGY_PASSTHROUGH) -> str:
    """Encode raw diagram source for the placeholder element.

    ``passthrough`` yields HTML-escaped text for a data attribute; the browser
    decodes it back to the raw source. ``mermaid-entities`` yields Mermaid
    markers for element text; note that it also rewrites the ``>`` of arrows
    such as ``-->``.
    """
    if _require_strategy(strategy) == STRATEGY_MERMAID_ENTITIES:
        return to_mermaid_entities(raw)
    return escape_html(raw)


def decode_source(encoded: str, strategy: str = STRATEGY_PASSTHROUGH) -> str:
    """Apply the decoding the consuming layer performs for ``strategy``."""
    if _require_strategy(strategy) == STRATEGY_MERMAID_ENTITIES:
        return from_mermaid_entities(encoded)
    return unescape_html(encoded)


def mm_init(**config: Any) -> str:
    """Return a Mermaid init directive, e.g. ``%%{init:{"theme":"dark"}}%%``."""
    # Stable JSON: sorted keys + compact separators.
    payload = json.dumps(config, sort_keys=True, separators=(",", ":"))
    return f"%%{{init:{payload}}}%%"
