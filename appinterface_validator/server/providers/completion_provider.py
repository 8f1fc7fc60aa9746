#!/usr/bin/env python3

import logging
from typing import List

from lsprotocol import types as lsp

from ...exceptions import DocumentParseError
from ...models.document import DocumentMapping
from ...models.schema_nodes import ObjectSchema, property_names
from ...parsers.document_navigator import node_at_path, path_at_offset
from ...utils.source_location import LineIndex
from ..registry_manager import RegistryManager, workspace_roots
from ..validation_engine import ValidationEngine

logger = logging.getLogger(__name__)


class CompletionProvider:
    """Provides schema property completion."""

    def __init__(self, registry_manager: RegistryManager):
        self.registry_manager = registry_manager

    def get_completions(self, params: lsp.CompletionParams, server) -> lsp.CompletionList:
        """Handle completion requests."""
        items: List[lsp.CompletionItem] = []
        uri = params.text_document.uri

        try:
            validator = self.registry_manager.get_validator_for_document(uri, workspace_roots(server.workspace))
            if validator is not None:
                document = server.workspace.get_text_document(uri)
                offset = LineIndex(document.source).offset_at(params.position)
                items = self.complete(validator, document.source, offset)
        except Exception as e:
            logger.warning(f"Completion failed for {uri}: {e}")

        return lsp.CompletionList(is_incomplete=False, items=items)

    def complete(self, validator: ValidationEngine, content: str, offset: int) -> List[lsp.CompletionItem]:
        """Declared properties of the object at ``offset`` that are not written yet."""
        try:
            document = validator.parser.parse(content)
        except DocumentParseError as e:
            logger.debug(f"No completion for unparsable document: {e}")
            return []

        schema_id = document.schema_id(validator.config.schema_field)
        if schema_id is None:
            return []

        path = path_at_offset(document.root, offset)
        node = node_at_path(document.root, path)
        if not isinstance(node, DocumentMapping):
            return []

        located = validator.resolver.resolve(schema_id, path, document.root)
        if located is None:
            return []
        schema = located.node
        if not isinstance(schema, ObjectSchema):
            return []

        existing = set(node.keys())
        items = []
        for name in property_names(schema):
            if name in existing:
                continue
            items.append(lsp.CompletionItem(
                label=name,
                kind=lsp.CompletionItemKind.Property,
                detail=schema.property_type(name),
                documentation=schema.property_description(name),
            ))
        return items
