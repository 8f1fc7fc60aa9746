"""Tests for language server wiring."""

import pytest
from lsprotocol import types as lsp

from appinterface_validator.server.base_server import AppInterfaceLanguageServer


@pytest.fixture
def language_server(config):
    return AppInterfaceLanguageServer(config)


def test_features_are_registered(language_server):
    features = language_server.server.lsp.fm.features

    for method in (
        lsp.TEXT_DOCUMENT_DID_OPEN,
        lsp.TEXT_DOCUMENT_DID_CHANGE,
        lsp.TEXT_DOCUMENT_DID_SAVE,
        lsp.TEXT_DOCUMENT_DID_CLOSE,
        lsp.TEXT_DOCUMENT_COMPLETION,
    ):
        assert method in features


def test_open_and_close_delegate_to_processor(language_server, monkeypatch):
    calls = []
    monkeypatch.setattr(
        language_server.document_processor,
        "process_document",
        lambda uri, content, server: calls.append(("process", uri, content)),
    )
    monkeypatch.setattr(
        language_server.document_processor,
        "close_document",
        lambda uri, server: calls.append(("close", uri)),
    )
    document = lsp.TextDocumentItem(uri="file:///w/app.yml", language_id="yaml", version=1, text="a: 1\n")

    language_server._on_text_document_did_open(None, lsp.DidOpenTextDocumentParams(text_document=document))
    language_server._on_text_document_did_save(
        None,
        lsp.DidSaveTextDocumentParams(text_document=lsp.TextDocumentIdentifier(uri=document.uri), text="a: 2\n"),
    )
    language_server._on_text_document_did_close(
        None, lsp.DidCloseTextDocumentParams(text_document=lsp.TextDocumentIdentifier(uri=document.uri))
    )

    assert calls == [
        ("process", "file:///w/app.yml", "a: 1\n"),
        ("process", "file:///w/app.yml", "a: 2\n"),
        ("close", "file:///w/app.yml"),
    ]
