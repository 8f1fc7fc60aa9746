"""Tests for the source-mapped YAML parser."""

import pytest

from appinterface_validator.exceptions import DocumentParseError, SchemaLoadError
from appinterface_validator.models.document import DocumentMapping, DocumentScalar, DocumentSequence, SourceRange
from appinterface_validator.parsers.yaml_parser import YamlParser, load_schema_file


def test_scalar_ranges_are_half_open_offsets(parser):
    document = parser.parse("name: payments\n")

    assert isinstance(document.root, DocumentMapping)
    key, value = document.root.pairs[0]
    assert key.range == SourceRange(0, 4)
    assert value.range == SourceRange(6, 14)
    assert value.value == "payments"


def test_plain_value_uses_literal_key_text(parser):
    document = parser.parse("1: one\ntrue: yes\nlist:\n- 2\n- null\n")

    assert document.root.keys() == ["1", "true", "list"]
    assert document.root.to_plain() == {"1": "one", "true": True, "list": [2, None]}


def test_timestamps_stay_text(parser):
    document = parser.parse("created: 2024-01-01\n")

    assert document.root.to_plain() == {"created": "2024-01-01"}


def test_unknown_tags_keep_source_text(parser):
    document = parser.parse("secret: !vault path/to/secret\n")

    assert document.root.to_plain() == {"secret": "path/to/secret"}


def test_aliases_resolve_to_anchor_value(parser):
    document = parser.parse("base: &b {x: 1}\ncopy: *b\n")

    assert document.root.to_plain() == {"base": {"x": 1}, "copy": {"x": 1}}


def test_aliased_nodes_share_one_plain_value(parser):
    plain = parser.parse("base: &b [1, 2]\ncopy: *b\n").root.to_plain()

    assert plain["base"] is plain["copy"]


def test_sequence_items_keep_order(parser):
    document = parser.parse("- a\n- b\n- c\n")

    assert isinstance(document.root, DocumentSequence)
    assert [item.value for item in document.root.items] == ["a", "b", "c"]
    assert all(isinstance(item, DocumentScalar) for item in document.root.items)


@pytest.mark.parametrize("content", ["", "# only a comment\n"])
def test_empty_documents_have_no_root(parser, content):
    assert parser.parse(content).root is None


@pytest.mark.parametrize(
    "content",
    [
        "a: [1, 2\n",
        "a: 1\n---\nb: 2\n",
        "a: b: c\n",
        "key: 'unterminated\n",
    ],
)
def test_malformed_yaml_raises_parse_error(parser, content):
    with pytest.raises(DocumentParseError):
        parser.parse(content)


def test_nesting_beyond_max_depth_raises():
    with pytest.raises(DocumentParseError):
        YamlParser(max_depth=2).parse("a: {b: {c: 1}}\n")


def test_schema_id_reads_reserved_field(parser):
    assert parser.parse("$schema: /app-1.yml\nname: x\n").schema_id("$schema") == "/app-1.yml"
    assert parser.parse("$schema:\n").schema_id("$schema") is None
    assert parser.parse("- $schema: /app-1.yml\n").schema_id("$schema") is None
    assert parser.parse("name: x\n").schema_id("$schema") is None


def test_load_schema_file_reads_json_and_yaml(tmp_path):
    (tmp_path / "a.json").write_text('{"type": "object"}', encoding="utf-8")
    (tmp_path / "b.yml").write_text("type: string\n", encoding="utf-8")

    assert load_schema_file(tmp_path / "a.json") == {"type": "object"}
    assert load_schema_file(tmp_path / "b.yml") == {"type": "string"}


def test_load_schema_file_wraps_failures(tmp_path):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(SchemaLoadError):
        load_schema_file(tmp_path / "broken.json")
    with pytest.raises(SchemaLoadError):
        load_schema_file(tmp_path / "missing.yml")


def _nested_aliases(levels, width=10):
    lines = [f"a0: &a0 [{', '.join(['x'] * width)}]"]
    for level in range(1, levels):
        lines.append(f"a{level}: &a{level} [{', '.join([f'*a{level - 1}'] * width)}]")
    return "\n".join(lines) + "\n"


def test_alias_expansion_beyond_node_budget_raises(parser):
    with pytest.raises(DocumentParseError, match="expands to more than"):
        parser.parse(_nested_aliases(8))


def test_moderate_alias_reuse_stays_within_budget():
    document = YamlParser(max_nodes=1000).parse(_nested_aliases(2))

    assert len(document.root.to_plain()["a1"]) == 10
