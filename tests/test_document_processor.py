"""Tests for validating documents and publishing diagnostics."""

from types import SimpleNamespace

import pytest

from appinterface_validator.server.document_processor import DocumentProcessor
from appinterface_validator.server.registry_manager import RegistryManager
from appinterface_validator.utils.uri_utils import path_to_uri


class RecordingServer:
    def __init__(self, workspace_root):
        self.workspace = SimpleNamespace(
            folders={"root": SimpleNamespace(uri=path_to_uri(workspace_root))},
            root_path=str(workspace_root),
        )
        self.published = []

    def publish_diagnostics(self, uri, diagnostics):
        self.published.append((uri, list(diagnostics)))


@pytest.fixture
def processor(config):
    return DocumentProcessor(RegistryManager(config), config)


def test_diagnostics_are_cleared_then_published(processor, workspace):
    server = RecordingServer(workspace)
    uri = path_to_uri(workspace / "data" / "app.yml")

    processor.process_document(uri, "$schema: /app-1.yml\ndescription: x\n", server)

    assert [call[0] for call in server.published] == [uri, uri]
    assert server.published[0][1] == []
    assert [d.message for d in server.published[1][1]] == ["Missing property 'name' at /"]


def test_duplicate_diagnostics_are_published_once(processor, workspace, monkeypatch):
    server = RecordingServer(workspace)
    uri = path_to_uri(workspace / "data" / "app.yml")
    validator = processor.registry_manager.get_validator(str(workspace))
    original = validator.validate_document
    monkeypatch.setattr(validator, "validate_document", lambda content, doc_uri: original(content, doc_uri) * 2)

    processor.process_document(uri, "$schema: /app-1.yml\ndescription: x\n", server)

    assert len(server.published[-1][1]) == 1


def test_non_yaml_documents_are_ignored(processor, workspace):
    server = RecordingServer(workspace)

    processor.process_document(path_to_uri(workspace / "data" / "notes.txt"), "anything", server)

    assert server.published == []


def test_documents_outside_workspace_are_ignored(processor, workspace, tmp_path_factory):
    server = RecordingServer(workspace)
    elsewhere = tmp_path_factory.mktemp("elsewhere")

    processor.process_document(path_to_uri(elsewhere / "app.yml"), "$schema: /app-1.yml\n", server)

    assert server.published == []


def test_validation_failure_leaves_diagnostics_cleared(processor, workspace, monkeypatch):
    server = RecordingServer(workspace)
    uri = path_to_uri(workspace / "data" / "app.yml")
    validator = processor.registry_manager.get_validator(str(workspace))

    def explode(content, doc_uri):
        raise RuntimeError("boom")

    monkeypatch.setattr(validator, "validate_document", explode)

    processor.process_document(uri, "$schema: /app-1.yml\n", server)

    assert server.published == [(uri, [])]


def test_close_clears_diagnostics(processor, workspace):
    server = RecordingServer(workspace)
    uri = path_to_uri(workspace / "data" / "app.yml")

    processor.close_document(uri, server)

    assert server.published == [(uri, [])]
