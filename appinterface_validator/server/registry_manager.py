#!/usr/bin/env python3

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..config import ValidatorConfig, validator_config
from ..schema.registry import SchemaRegistry
from ..utils.uri_utils import is_within, uri_to_path
from .validation_engine import ValidationEngine

logger = logging.getLogger(__name__)


def workspace_roots(workspace) -> List[str]:
    """Filesystem roots of a pygls workspace (folders first, then the root path)."""
    roots = [uri_to_path(folder.uri) for folder in getattr(workspace, "folders", {}).values()]
    root_path = getattr(workspace, "root_path", None)
    if not roots and root_path:
        roots.append(root_path)
    return roots


class RegistryManager:
    """Owns one validator per workspace root.

    Validators are built on first use and kept for the lifetime of the
    process; schema files are read only once per root.
    """

    def __init__(self, config: ValidatorConfig = validator_config):
        self.config = config
        self.validators: Dict[str, ValidationEngine] = {}

    def get_validator(self, workspace_root: str) -> ValidationEngine:
        if workspace_root not in self.validators:
            logger.info(f"Creating schema validator for {workspace_root}")
            registry = SchemaRegistry(self.config)
            registry.load(Path(workspace_root) / self.config.schema_dir_name)
            self.validators[workspace_root] = ValidationEngine(registry, self.config)
        return self.validators[workspace_root]

    def find_workspace_root(self, uri: str, roots: Iterable[str]) -> Optional[str]:
        """Innermost workspace root containing the document, if any."""
        file_path = uri_to_path(uri)
        candidates = [root for root in roots if is_within(file_path, root)]
        if not candidates:
            return None
        return max(candidates, key=len)

    def get_validator_for_document(self, uri: str, roots: Iterable[str]) -> Optional[ValidationEngine]:
        workspace_root = self.find_workspace_root(uri, roots)
        if workspace_root is None:
            return None
        return self.get_validator(workspace_root)
