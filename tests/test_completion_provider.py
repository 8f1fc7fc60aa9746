"""Tests for schema property completion."""

from types import SimpleNamespace

import pytest
from lsprotocol import types as lsp

from appinterface_validator.server.providers.completion_provider import CompletionProvider
from appinterface_validator.server.registry_manager import RegistryManager
from appinterface_validator.utils.uri_utils import path_to_uri


@pytest.fixture
def provider(config):
    return CompletionProvider(RegistryManager(config))


def _labels(items):
    return [item.label for item in items]


def _offset_after(content, needle):
    return content.index(needle) + 1


def test_missing_properties_in_declaration_order(provider, engine):
    content = "$schema: /app-sre/team-1.yml\na: x\n"

    items = provider.complete(engine, content, _offset_after(content, "a: x"))

    assert _labels(items) == ["b", "c"]
    assert all(item.kind == lsp.CompletionItemKind.Property for item in items)
    assert [item.detail for item in items] == ["integer", "boolean"]


def test_root_completion_skips_written_keys(provider, engine):
    content = "$schema: /app-1.yml\nname: payments\n"

    items = provider.complete(engine, content, _offset_after(content, "name"))

    assert _labels(items) == ["description", "serviceOwners", "endpoints", "service"]
    assert items[0].detail == "string"
    assert items[1].detail == "array"


def test_description_becomes_documentation(provider, engine):
    content = "$schema: /app-1.yml\ndescription: x\n"

    items = provider.complete(engine, content, _offset_after(content, "description"))

    name = next(item for item in items if item.label == "name")
    assert name.documentation == "Application name"


def test_completion_follows_reference(provider, engine):
    content = "$schema: /app-1.yml\nname: a\nserviceOwners:\n- name: Jane\n"

    items = provider.complete(engine, content, _offset_after(content, "- name") + 1)

    assert _labels(items) == ["email"]


def test_completion_selects_matching_branch(provider, engine):
    content = "$schema: /app-1.yml\nname: a\nendpoints:\n- path: /health\n"

    items = provider.complete(engine, content, _offset_after(content, "- path") + 1)

    assert _labels(items) == ["port"]


def test_completion_resolves_reference_then_branch(provider, engine):
    content = "$schema: /app-1.yml\nname: a\nservice:\n  kind: a\n"

    items = provider.complete(engine, content, _offset_after(content, "  kind") + 1)

    assert _labels(items) == ["alpha"]


@pytest.mark.parametrize(
    "content, needle",
    [
        ("name: a\nother: b\n", "other"),
        ("$schema: /nope-1.yml\nname: a\n", "name"),
        ("$schema: /app-1.yml\nname: [a\n", "name"),
        ("$schema: /app-1.yml\nname: payments\n", "payments"),
        ("$schema: /app-1.yml\nservice:\n  kind: z\n", "kind"),
    ],
)
def test_completion_is_empty_when_nothing_applies(provider, engine, content, needle):
    assert provider.complete(engine, content, _offset_after(content, needle)) == []


def _server(workspace_root, uri, content):
    documents = {uri: SimpleNamespace(source=content)}
    workspace = SimpleNamespace(
        folders={"root": SimpleNamespace(uri=path_to_uri(workspace_root))},
        root_path=str(workspace_root),
        get_text_document=lambda doc_uri: documents[doc_uri],
    )
    return SimpleNamespace(workspace=workspace)


def test_get_completions_converts_cursor_position(provider, workspace):
    uri = path_to_uri(workspace / "data" / "team.yml")
    server = _server(workspace, uri, "$schema: /app-sre/team-1.yml\nb: 1\n")
    params = lsp.CompletionParams(
        text_document=lsp.TextDocumentIdentifier(uri=uri),
        position=lsp.Position(line=1, character=0),
    )

    result = provider.get_completions(params, server)

    assert isinstance(result, lsp.CompletionList)
    assert _labels(result.items) == ["a", "c"]


def test_get_completions_outside_workspace_is_empty(provider, workspace, tmp_path_factory):
    elsewhere = tmp_path_factory.mktemp("elsewhere")
    uri = path_to_uri(elsewhere / "team.yml")
    server = _server(workspace, uri, "$schema: /app-sre/team-1.yml\n")
    params = lsp.CompletionParams(
        text_document=lsp.TextDocumentIdentifier(uri=uri),
        position=lsp.Position(line=0, character=0),
    )

    assert provider.get_completions(params, server).items == []


def test_get_completions_swallows_failures(provider, workspace):
    uri = path_to_uri(workspace / "data" / "gone.yml")
    server = _server(workspace, uri, "")
    params = lsp.CompletionParams(
        text_document=lsp.TextDocumentIdentifier(uri=path_to_uri(workspace / "data" / "other.yml")),
        position=lsp.Position(line=0, character=0),
    )

    assert provider.get_completions(params, server).items == []


def test_completion_at_end_of_document_inside_nested_item(provider, engine):
    content = "$schema: /app-1.yml\nname: a\nserviceOwners:\n- name: Jane\n  "

    items = provider.complete(engine, content, len(content))

    assert _labels(items) == ["email"]
