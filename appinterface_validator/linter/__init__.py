# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line validation of AppInterface YAML files."""

import logging
from pathlib import Path
from typing import Iterable, List

from lsprotocol import types as lsp

from ..config import ValidatorConfig, validator_config
from ..server.diagnostics import deduplicate_diagnostics
from ..server.registry_manager import RegistryManager
from ..utils.uri_utils import path_to_uri
from .report import LintResult

__all__ = ['lint_files', 'LintResult']

logger = logging.getLogger(__name__)


def _add_diagnostic(result: LintResult, diagnostic: lsp.Diagnostic):
    line = diagnostic.range.start.line + 1
    column = diagnostic.range.start.character + 1
    if diagnostic.severity == lsp.DiagnosticSeverity.Error:
        result.add_error(diagnostic.message, line, column, diagnostic.source)
    else:
        result.add_warning(diagnostic.message, line, column, diagnostic.source)


def lint_files(
    workspace_root: Path,
    file_paths: Iterable[Path],
    config: ValidatorConfig = validator_config,
) -> List[LintResult]:
    """Validate files against the schemas of ``workspace_root``.

    Args:
        workspace_root: Directory holding the ``schemas`` folder
        file_paths: Documents to validate

    Returns:
        List of LintResult objects, one per file
    """
    registry_manager = RegistryManager(config)
    validator = registry_manager.get_validator(str(Path(workspace_root).resolve()))

    results = []
    for file_path in file_paths:
        result = LintResult(file_path)
        try:
            content = Path(file_path).read_text(encoding='utf-8')
            diagnostics = validator.validate_document(content, path_to_uri(Path(file_path).resolve()))
            for diagnostic in deduplicate_diagnostics(diagnostics):
                _add_diagnostic(result, diagnostic)
        except Exception as e:
            logger.error(f"Unexpected error while linting {file_path}: {e}")
            result.add_error(f"Unexpected error during linting: {e}")
        results.append(result)

    return results
