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

"""Configuration management for the AppInterface validator."""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .utils.logging_utils import configure_split_stream_logging, configure_stderr_logging

_ENV_PREFIX = "APPINTERFACE_VALIDATOR_"


def _env_tuple(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(_ENV_PREFIX + name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class ValidatorConfig:
    """Configuration class for schema loading, validation and logging."""
    log_level: str = "INFO"
    print_level: str = "WARNING"
    log_file: Optional[str] = None

    # schema layout under a workspace root
    schema_dir_name: str = "schemas"
    schema_extensions: Tuple[str, ...] = (".yml",)
    meta_schemas: Tuple[str, ...] = (
        "json-schema-spec-draft-06.json",
        "common-1.json",
        "metaschema-1.json",
    )

    # validated documents
    schema_field: str = "$schema"
    document_extensions: Tuple[str, ...] = (".yml", ".yaml")
    max_resolution_depth: int = 64

    # diagnostic source labels
    parser_source: str = "Yaml Parser"
    validator_source: str = "AppInterface Schema Validator"

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        defaults = cls()
        return cls(
            log_level=os.getenv(_ENV_PREFIX + 'LOG_LEVEL', defaults.log_level),
            print_level=os.getenv(_ENV_PREFIX + 'PRINT_LEVEL', defaults.print_level),
            log_file=os.getenv(_ENV_PREFIX + 'LOG_FILE') or None,
            schema_dir_name=os.getenv(_ENV_PREFIX + 'SCHEMA_DIR', defaults.schema_dir_name),
            schema_extensions=_env_tuple('SCHEMA_EXTENSIONS', defaults.schema_extensions),
            meta_schemas=_env_tuple('META_SCHEMAS', defaults.meta_schemas),
            schema_field=os.getenv(_ENV_PREFIX + 'SCHEMA_FIELD', defaults.schema_field),
            document_extensions=_env_tuple('DOCUMENT_EXTENSIONS', defaults.document_extensions),
            max_resolution_depth=int(os.getenv(_ENV_PREFIX + 'MAX_RESOLUTION_DEPTH', str(defaults.max_resolution_depth))),
        )

    def set_logging(self) -> logging.Logger:
        """Setup CLI logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('appinterface_validator')

    def set_server_logging(self) -> logging.Logger:
        """Setup language server logging; stdout is reserved for the protocol."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        configure_stderr_logging(level=level, log_file=self.log_file)

        return logging.getLogger('appinterface_validator')


# Global configuration instance
validator_config = ValidatorConfig.from_env()
