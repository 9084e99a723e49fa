import pytest

from mermaid_pages.entities import (
    decode_source,
    encode_source,
    escape_html,
    from_mermaid_entities,
    mm_init,
    to_mermaid_entities,
    unescape_html,
)

def test_escape_html_ampersand():
    assert escape_html("foo & bar") == "foo &amp; bar"

def test_escape_html_angle_brackets_and_quotes():
    assert escape_html("<div>") == "&lt;div&gt;"
    assert escape_html('"hello"') == "&quot;hello&quot;"
    assert escape_html("it's") == "it&#39;s"

def test_escape_html_ampersand_first_no_double_escape():
    assert escape_html('<a href="foo">bar & baz</a>') == (
        "&lt;a href=&quot;foo&quot;&gt;bar &amp; baz&lt;/a&gt;"
    )

def test_escape_html_is_not_idempotent():
    assert escape_html(escape_html("<")) == "&amp;lt;"

@pytest.mark.parametrize(
    "raw",
    [
        "graph TD",
        "sequenceDiagram\n  Alice->>Bob: hi",
        "",
        'A[List<int>] --> B & "C" it\'s',
    ],
)
def test_unescape_html_inverts_escape_html(raw):
    assert unescape_html(escape_html(raw)) == raw

def test_mermaid_entities_round_trip():
    raw = 'A[List<int>] --> B & "C"'
    encoded = to_mermaid_entities(raw)
    assert encoded == "A[List#lt;int#gt;] --#gt; B #amp; #quot;C#quot;"
    assert from_mermaid_entities(encoded) == raw

def test_mermaid_entities_escaped_ampersand_reference():
    # An authored "&lt;" must come back as text, not as "<".
    assert from_mermaid_entities(to_mermaid_entities("&lt;")) == "&lt;"

def test_passthrough_encoding_has_no_raw_markup_characters():
    encoded = encode_source("A[List<int>] --> B & \"x\" 'y'")
    for char in "<>\"'":
        assert char not in encoded
    assert decode_source(encoded) == "A[List<int>] --> B & \"x\" 'y'"

def test_mermaid_entities_strategy_pairs_with_its_decoder():
    encoded = encode_source("a --> b", "mermaid-entities")
    assert encoded == "a --#gt; b"
    assert decode_source(encoded, "mermaid-entities") == "a --> b"

def test_unknown_strategy_rejected():
    with pytest.raises(ValueError, match="unknown entity strategy"):
        encode_source("x", "base64")
    with pytest.raises(ValueError):
        decode_source("x", "base64")

def test_mm_init_is_compact_json():
    assert mm_init(theme="dark") == '%%{init:{"theme":"dark"}}%%'
