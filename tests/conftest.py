import json
from pathlib import Path

import pytest

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>Test</title></head>
<body>
{body}
</body>
</html>"""


def _make_mermaid_install(root: Path, version: str = "11.4.0", entry: bool = True) -> Path:
    pkg = root / "node_modules" / "mermaid"
    dist = pkg / "dist"
    dist.mkdir(parents=True)
    (pkg / "package.json").write_text(
        json.dumps({"name": "mermaid", "version": version}), encoding="utf-8"
    )
    if entry:
        (dist / "mermaid.esm.min.mjs").write_text("export default {};\n", encoding="utf-8")
        chunks = dist / "chunks" / "mermaid.esm.min"
        (chunks / "nested").mkdir(parents=True)
        (chunks / "flowDiagram-abc.mjs").write_text("export {};\n", encoding="utf-8")
        (chunks / "nested" / "chunk-xyz.mjs").write_text("export {};\n", encoding="utf-8")
    return pkg


@pytest.fixture
def make_install():
    """Factory creating a minimal node_modules/mermaid tree; returns the package dir."""
    return _make_mermaid_install


@pytest.fixture
def mermaid_install(tmp_path):
    """A complete local mermaid install under ``tmp_path / "project"``."""
    project = tmp_path / "project"
    project.mkdir()
    _make_mermaid_install(project)
    return project


@pytest.fixture
def code_block():
    def build(escaped: str, lang_class: str = "mermaid") -> str:
        return (
            f'<pre><code class="{lang_class}">{escaped}</code>'
            '<button type="button">Copy</button></pre>'
        )

    return build


@pytest.fixture
def page():
    def build(body: str) -> str:
        return PAGE_TEMPLATE.format(body=body)

    return build
