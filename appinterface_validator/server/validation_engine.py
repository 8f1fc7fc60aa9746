#!/usr/bin/env python3

import logging
from typing import List, Optional

from lsprotocol import types as lsp

from ..config import ValidatorConfig, validator_config
from ..exceptions import DocumentParseError, SchemaNotFoundError
from ..models.document import DocumentMapping, ParsedDocument, SourceRange
from ..parsers.document_navigator import path_from_pointer, range_at_path
from ..parsers.yaml_parser import YamlParser, yaml_parser
from ..resolvers.schema_resolver import SchemaResolver
from ..schema.registry import SchemaError, SchemaRegistry
from ..utils.source_location import LineIndex, document_start_range

logger = logging.getLogger(__name__)

INVALID_YAML_MESSAGE = "Invalid YAML document"


def format_error_message(error: SchemaError) -> str:
    """Human readable message for one schema error."""
    error_path = error.instance_path or "/"
    if error.keyword == "additionalProperties" and "additionalProperty" in error.params:
        return f"Unexpected property '{error.params['additionalProperty']}' at {error_path}"
    if error.keyword == "required" and "missingProperty" in error.params:
        return f"Missing property '{error.params['missingProperty']}' at {error_path}"
    return f"At {error_path}: {error.message}"


class ValidationEngine:
    """Validates YAML documents against the schemas of one workspace."""

    def __init__(
        self,
        registry: SchemaRegistry,
        config: ValidatorConfig = validator_config,
        parser: Optional[YamlParser] = None,
    ):
        self.registry = registry
        self.config = config
        self.parser = parser or yaml_parser
        self.resolver = SchemaResolver(registry, config.max_resolution_depth)

    def validate_document(self, document_content: str, uri: str = "") -> List[lsp.Diagnostic]:
        """Validate a full document and return diagnostics."""
        line_index = LineIndex(document_content)

        try:
            document = self.parser.parse(document_content)
        except DocumentParseError as e:
            logger.error(f"Failed to parse YAML in document {uri}: {e}")
            return [lsp.Diagnostic(
                range=document_start_range(),
                message=INVALID_YAML_MESSAGE,
                severity=lsp.DiagnosticSeverity.Error,
                source=self.config.parser_source,
            )]

        schema_id = document.schema_id(self.config.schema_field)
        if schema_id is None:
            logger.debug(f"No '{self.config.schema_field}' declared in {uri}, skipping validation")
            return []

        try:
            errors = self.registry.validate(schema_id, document.root.to_plain())
        except SchemaNotFoundError as e:
            logger.warning(f"{e} for document {uri}")
            return [self._diagnostic(str(e), self._schema_field_range(document, line_index))]
        except Exception as e:
            error_msg = f"Failed to validate document {uri}: {e}"
            logger.error(error_msg)
            return [self._diagnostic(error_msg, line_index.first_char_range())]

        if errors:
            logger.info(f"{len(errors)} validation errors in {uri}")

        return [
            self._diagnostic(format_error_message(error), self._error_range(error, document, line_index))
            for error in errors
        ]

    def _diagnostic(self, message: str, diagnostic_range: lsp.Range) -> lsp.Diagnostic:
        return lsp.Diagnostic(
            range=diagnostic_range,
            message=message,
            severity=lsp.DiagnosticSeverity.Error,
            source=self.config.validator_source,
        )

    def _error_range(self, error: SchemaError, document: ParsedDocument, line_index: LineIndex) -> lsp.Range:
        path = path_from_pointer(document.root, error.instance_path)
        node_range = range_at_path(document.root, path)
        if node_range is None:
            return line_index.first_char_range()
        return self._trimmed(node_range, line_index)

    def _schema_field_range(self, document: ParsedDocument, line_index: LineIndex) -> lsp.Range:
        if isinstance(document.root, DocumentMapping):
            node = document.root.get(self.config.schema_field)
            if node is not None:
                return self._trimmed(node.range, line_index)
        return line_index.first_char_range()

    @staticmethod
    def _trimmed(node_range: SourceRange, line_index: LineIndex) -> lsp.Range:
        # block collections end where the next token starts; drop the trailing blank text
        covered = line_index.text[node_range.start:node_range.end]
        end = node_range.start + len(covered.rstrip())
        if end <= node_range.start:
            end = node_range.end
        return line_index.range_of(node_range.start, end)
