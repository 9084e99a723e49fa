# mermaid_pages/markup.py
"""Theme-reactive Mermaid markup, page styles and the activation script."""
from __future__ import annotations

import json
import re
from typing import Optional

from .config import PageRenderOptions
from .constants import (
    BLOCK_END,
    BLOCK_START,
    STRATEGY_MERMAID_ENTITIES,
    STRATEGY_PASSTHROUGH,
    THEME_DARK,
    THEME_LIGHT,
)
from .entities import encode_source, escape_html, mm_init, unescape_html
from .locate import transform_blocks


_HEAD_END_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_END_RE = re.compile(r"</body\s*>", re.IGNORECASE)

_IMPORT_PLACEHOLDER = "__MERMAID_IMPORT_URL__"

_STYLE_COMMON = """\
/* Contain mermaid blocks */
.mermaid-block {
  overflow-x: auto;
  max-width: 100%;
}

.mermaid-block > .mermaid {
  max-width: 100%;
}

.mermaid-block svg {
  max-width: 100%;
  height: auto;
}
"""

_STYLE_SINGLE = """\
/* The fallback stays visible until the diagram has rendered */
.mermaid-block.mermaid-rendered > pre {
  display: none;
}
"""

_STYLE_DUAL = """\
/* Hide fallback pre when mermaid is enabled */
:root.mermaid-enabled .mermaid-block > pre {
  display: none;
}

/* Hide mermaid divs until JS reveals the correct one (visibility allows rendering) */
.mermaid-block > .mermaid {
  visibility: hidden;
  position: absolute;
}

.mermaid-block > .mermaid[style*="display: block"] {
  visibility: visible;
  position: static;
}
"""

_SCRIPT_THEME = """\
// The site theme lives in data-theme on the root element; anything but dark/light follows the OS.
function isDarkMode() {
  const theme = document.documentElement.dataset.theme;
  if (theme === "dark") return true;
  if (theme === "light") return false;
  return window.matchMedia("(prefers-color-scheme: dark)").matches;
}
"""

_SCRIPT_SINGLE = """\
import mermaid from __MERMAID_IMPORT_URL__;

mermaid.initialize({
  startOnLoad: false,
  flowchart: { useMaxWidth: true },
  sequence: { useMaxWidth: true },
});

__THEME__
let renderCount = 0;
let queue = Promise.resolve();

async function renderDiagram(el, theme) {
  const source = `%%{init:${JSON.stringify({ theme })}}%%\\n` + el.dataset.mermaidSource;
  // Fresh id per render: some diagram types key internal elements on it.
  const id = `mermaid-svg-${renderCount++}`;
  try {
    const { svg, bindFunctions } = await mermaid.render(id, source);
    el.innerHTML = svg;
    if (bindFunctions) bindFunctions(el);
    el.dataset.mermaidTheme = theme;
    el.parentElement.classList.add("mermaid-rendered");
  } catch (err) {
    console.error("mermaid: failed to render diagram", err);
    document.getElementById("d" + id)?.remove();
  }
}

function renderAll() {
  const theme = isDarkMode() ? "__DARK__" : "__LIGHT__";
  queue = queue.then(async () => {
    const diagrams = document.querySelectorAll(".mermaid-block > .mermaid[data-mermaid-source]");
    for (const el of diagrams) {
      if (el.dataset.mermaidTheme !== theme) {
        await renderDiagram(el, theme);
      }
    }
  });
  return queue;
}

renderAll();

new MutationObserver((mutations) => {
  if (mutations.some((m) => m.attributeName === "data-theme")) renderAll();
}).observe(document.documentElement, { attributes: true, attributeFilter: ["data-theme"] });

window.matchMedia("(prefers-color-scheme: dark)").addEventListener("change", renderAll);
"""

_SCRIPT_DUAL = """\
import mermaid from __MERMAID_IMPORT_URL__;

document.documentElement.classList.add("mermaid-enabled");

mermaid.initialize({
  startOnLoad: true,
  flowchart: { useMaxWidth: true },
  sequence: { useMaxWidth: true },
});

__THEME__
function updateDiagramVisibility() {
  const dark = isDarkMode();
  document.querySelectorAll(".mermaid-block .mermaid.dark").forEach((el) => {
    el.style.display = dark ? "block" : "none";
  });
  document.querySelectorAll(".mermaid-block .mermaid.light").forEach((el) => {
    el.style.display = dark ? "none" : "block";
  });
}

// Wait until every diagram has an SVG before revealing one variant.
requestAnimationFrame(function check() {
  const all = document.querySelectorAll("div.mermaid");
  const rendered = document.querySelectorAll("div.mermaid svg");
  if (rendered.length < all.length) {
    requestAnimationFrame(check);
  } else {
    updateDiagramVisibility();
  }
});

new MutationObserver((mutations) => {
  if (mutations.some((m) => m.attributeName === "data-theme")) updateDiagramVisibility();
}).observe(document.documentElement, { attributes: true });

window.matchMedia("(prefers-color-scheme: dark)").addEventListener("change", updateDiagramVisibility);
"""


def theme_directive(theme: str) -> str:
    return mm_init(theme=theme)


def _fallback(raw: str) -> str:
    return f'<pre><code class="language-mermaid">{escape_html(raw)}</code></pre>'


def to_mermaid_block(escaped: str, strategy: str = STRATEGY_PASSTHROUGH) -> str:
    """Build the replacement markup for one HTML-escaped diagram source.

    ``passthrough`` emits a single placeholder that carries the source in a
    data attribute; the page script renders it and re-renders it in place on
    theme changes. ``mermaid-entities`` emits pre-themed dark and light
    copies as element text, toggled by the script. Both carry a ``<pre>``
    fallback showing the readable source.
    """
    raw = unescape_html(escaped).strip()
    encoded = encode_source(raw, strategy)

    if strategy == STRATEGY_MERMAID_ENTITIES:
        dark = f'<div class="mermaid dark">{theme_directive(THEME_DARK)}\n{encoded}</div>'
        light = f'<div class="mermaid light">{theme_directive(THEME_LIGHT)}\n{encoded}</div>'
        body = dark + light
    else:
        body = f'<div class="mermaid" data-mermaid-source="{encoded}"></div>'

    return BLOCK_START + body + _fallback(raw) + BLOCK_END


def page_style(strategy: str = STRATEGY_PASSTHROUGH) -> str:
    variant = _STYLE_DUAL if strategy == STRATEGY_MERMAID_ENTITIES else _STYLE_SINGLE
    return f"\n<style>\n{_STYLE_COMMON}\n{variant}</style>\n"


def _js_string(value: str) -> str:
    # A JSON string is a valid JS string literal; "</" must not close the script element.
    return json.dumps(value).replace("</", "<\\/")


def page_script(import_url: str, strategy: str = STRATEGY_PASSTHROUGH) -> str:
    """Return the ``<script type="module">`` that loads and drives Mermaid."""
    template = _SCRIPT_DUAL if strategy == STRATEGY_MERMAID_ENTITIES else _SCRIPT_SINGLE
    body = (
        template.replace("__THEME__", _SCRIPT_THEME)
        .replace("__DARK__", THEME_DARK)
        .replace("__LIGHT__", THEME_LIGHT)
        .replace(_IMPORT_PLACEHOLDER, _js_string(import_url))
    )
    return f'\n<script type="module">\n{body}</script>\n'


def inject_assets(html: str, style: Optional[str], script: Optional[str]) -> str:
    """Insert ``style`` before the first ``</head>`` and ``script`` before the last ``</body>``."""
    if style:
        head = _HEAD_END_RE.search(html)
        if head is not None:
            html = html[: head.start()] + style + html[head.start() :]

    if script:
        body_ends = list(_BODY_END_RE.finditer(html))
        if body_ends:
            at = body_ends[-1].start()
            html = html[:at] + script + html[at:]

    return html


def process_mermaid_page(html: str, options: PageRenderOptions) -> tuple[str, int]:
    """Rewrite the diagram blocks of one page and add style/script when needed.

    Returns ``(html, blocks_rewritten)``; pages without diagram blocks are
    returned unchanged.
    """
    html, count = transform_blocks(
        html,
        lambda escaped: to_mermaid_block(escaped, options.strategy),
        language=options.language,
    )
    if not count:
        return html, 0

    html = inject_assets(
        html,
        page_style(options.strategy),
        page_script(options.import_url, options.strategy),
    )
    return html, count
