#!/usr/bin/env python3

import logging

from pygls.server import LanguageServer

from ..config import ValidatorConfig, validator_config
from ..utils.uri_utils import uri_to_path
from .diagnostics import deduplicate_diagnostics
from .registry_manager import RegistryManager, workspace_roots

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """Handles document validation and diagnostics publishing."""

    def __init__(self, registry_manager: RegistryManager, config: ValidatorConfig = validator_config):
        self.registry_manager = registry_manager
        self.config = config

    def is_validated_document(self, uri: str) -> bool:
        return uri_to_path(uri).endswith(tuple(self.config.document_extensions))

    def process_document(self, uri: str, content: str, server: LanguageServer):
        """Validate a document and replace its diagnostics."""
        if not self.is_validated_document(uri):
            return

        try:
            validator = self.registry_manager.get_validator_for_document(uri, workspace_roots(server.workspace))
        except Exception as e:
            logger.error(f"Failed to load schemas for {uri}: {e}")
            return
        if validator is None:
            logger.debug(f"{uri} is outside of every workspace folder, skipping")
            return

        # Old diagnostics disappear before the new run; the empty window is accepted.
        server.publish_diagnostics(uri, [])

        try:
            diagnostics = deduplicate_diagnostics(validator.validate_document(content, uri))
        except Exception as e:
            logger.error(f"Error validating document {uri}: {e}")
            return

        try:
            logger.info(f"Publishing {len(diagnostics)} diagnostics for {uri}")
            server.publish_diagnostics(uri, diagnostics)
        except Exception as e:
            logger.error(f"Failed to publish diagnostics {uri}: {e}")

    def close_document(self, uri: str, server: LanguageServer):
        """Handle document close event."""
        server.publish_diagnostics(uri, [])
