import pytest

from mermaid_pages import cli

pytestmark = pytest.mark.integration


@pytest.fixture
def docs(tmp_path, monkeypatch, page, code_block):
    """A small generated-docs tree; the working directory holds no settings file."""
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "docs"
    (out / "classes").mkdir(parents=True)
    (out / "index.html").write_text(page(code_block("graph TD\n  A --&gt; B")), encoding="utf-8")
    (out / "classes" / "Foo.html").write_text(
        page(code_block("classDiagram\n  class Foo~List&lt;int&gt;~")), encoding="utf-8"
    )
    (out / "plain.html").write_text(page("<p>nothing here</p>"), encoding="utf-8")
    return out


def test_remote_mode_rewrites_pages(docs, capsys):
    plain_before = (docs / "plain.html").read_text(encoding="utf-8")

    cli.main([str(docs)])

    out = capsys.readouterr().out
    assert "processed 3 page(s), rewrote 2" in out
    index = (docs / "index.html").read_text(encoding="utf-8")
    assert '<div class="mermaid-block">' in index
    assert "unpkg.com/mermaid@11" in index
    assert (docs / "plain.html").read_text(encoding="utf-8") == plain_before
    assert not (docs / "assets").exists()


def test_local_mode_stages_assets(docs, mermaid_install, capsys):
    dist = mermaid_install / "node_modules" / "mermaid" / "dist"

    cli.main([str(docs), "--mode", "local", "--dist-dir", str(dist)])

    foo = (docs / "classes" / "Foo.html").read_text(encoding="utf-8")
    assert 'import mermaid from "../assets/mermaid/mermaid.esm.min.mjs";' in foo
    staged = docs / "assets" / "mermaid"
    assert (staged / "mermaid.esm.min.mjs").is_file()
    assert (staged / "chunks" / "mermaid.esm.min" / "nested" / "chunk-xyz.mjs").is_file()


def test_config_file_selects_strategy(docs, tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("mermaid:\n  strategy: mermaid-entities\n", encoding="utf-8")

    cli.main([str(docs), "--config", str(config)])

    index = (docs / "index.html").read_text(encoding="utf-8")
    assert '<div class="mermaid dark">' in index
    assert "updateDiagramVisibility" in index


def test_missing_local_install_exits_2(docs, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(docs), "--mode", "local", "--dist-dir", str(tmp_path / "nowhere")])

    assert exc.value.code == 2
    assert "error:" in capsys.readouterr().err
    assert '<div class="mermaid-block">' not in (docs / "index.html").read_text(encoding="utf-8")


def test_invalid_settings_exit_2(docs, tmp_path, capsys):
    config = tmp_path / "bad.yaml"
    config.write_text("mode: cdn\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main([str(docs), "--config", str(config)])

    assert exc.value.code == 2
    assert "mode must be one of" in capsys.readouterr().err


def test_strict_fails_on_warnings(docs, tmp_path, capsys):
    config = tmp_path / "warn.yaml"
    config.write_text("colour: blue\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main([str(docs), "--config", str(config), "--strict"])
    assert exc.value.code == 2
    assert "warning: unknown setting 'colour'" in capsys.readouterr().err

    cli.main([str(docs), "--config", str(config)])


def test_missing_output_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "nope")])
    assert exc.value.code == 2
