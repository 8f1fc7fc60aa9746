#!/usr/bin/env python3

import logging
from typing import Optional

from pygls.server import LanguageServer
from lsprotocol import types as lsp

from .. import __version__
from ..config import ValidatorConfig, validator_config
from .document_processor import DocumentProcessor
from .providers.completion_provider import CompletionProvider
from .registry_manager import RegistryManager

logger = logging.getLogger(__name__)


class AppInterfaceLanguageServer:
    """Main language server class for AppInterface YAML files."""

    def __init__(self, config: ValidatorConfig = validator_config):
        self.server = LanguageServer(
            "appinterface-validator",
            __version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
        )
        self.config = config

        # Initialize components
        self.registry_manager = RegistryManager(config)
        self.document_processor = DocumentProcessor(self.registry_manager, config)
        self.completion_provider = CompletionProvider(self.registry_manager)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all LSP handlers."""

        @self.server.feature(lsp.INITIALIZE)
        def initialize(ls, params):
            self._on_initialize(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
        def did_open(ls, params):
            self._on_text_document_did_open(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(ls, params):
            self._on_text_document_did_change(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
        def did_save(ls, params):
            self._on_text_document_did_save(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(ls, params):
            self._on_text_document_did_close(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_COMPLETION, lsp.CompletionOptions(trigger_characters=[" "]))
        def completion(ls, params):
            return self._on_completion(ls, params)

    def start(self):
        """Start the language server on stdio."""
        self.server.start_io()

    def start_tcp(self, host: str, port: int):
        self.server.start_tcp(host, port)

    def _on_initialize(self, ls, params: lsp.InitializeParams):
        """Handle server initialization."""
        folders = [folder.uri for folder in (params.workspace_folders or [])]
        logger.info(f"Initializing AppInterface Language Server for {folders or params.root_uri}")

    def _on_text_document_did_open(self, ls, params: lsp.DidOpenTextDocumentParams):
        """Handle document open event."""
        self.document_processor.process_document(params.text_document.uri, params.text_document.text, self.server)

    def _on_text_document_did_change(self, ls, params: lsp.DidChangeTextDocumentParams):
        """Handle document change event; the workspace already holds the new text."""
        uri = params.text_document.uri
        document = self.server.workspace.get_text_document(uri)
        self.document_processor.process_document(uri, document.source, self.server)

    def _on_text_document_did_save(self, ls, params: lsp.DidSaveTextDocumentParams):
        """Handle document save event."""
        uri = params.text_document.uri
        content: Optional[str] = params.text
        if content is None:
            content = self.server.workspace.get_text_document(uri).source
        self.document_processor.process_document(uri, content, self.server)

    def _on_text_document_did_close(self, ls, params: lsp.DidCloseTextDocumentParams):
        """Handle document close event."""
        self.document_processor.close_document(params.text_document.uri, self.server)

    def _on_completion(self, ls, params: lsp.CompletionParams) -> lsp.CompletionList:
        """Handle completion requests."""
        return self.completion_provider.get_completions(params, self.server)
