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

"""Schema registry: loads schema files of a workspace and resolves identifiers."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union
from urllib.parse import urldefrag, urljoin

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT7

from ..config import ValidatorConfig, validator_config
from ..exceptions import SchemaLoadError, SchemaNotFoundError
from ..models.schema_nodes import LocatedSchema
from ..parsers.yaml_parser import load_schema_file
from .formats import build_format_checker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaError:
    """One validation error of a whole-document run."""
    instance_path: str
    keyword: str
    message: str
    params: Dict[str, Any] = field(default_factory=dict)


def normalize_schema_id(schema_id: str) -> str:
    """Drop an empty trailing fragment (``.../schema#`` -> ``.../schema``)."""
    url, fragment = urldefrag(schema_id)
    return schema_id if fragment else url


def instance_pointer(path) -> str:
    return "".join("/" + str(token).replace("~", "~0").replace("/", "~1") for token in path)


class SchemaRegistry:
    """Collection of schema documents keyed by identifier.

    Wraps a ``referencing.Registry`` so the same resources serve both
    whole-document validation and the per-branch checks of the schema
    resolver.
    """

    def __init__(self, config: ValidatorConfig = validator_config):
        self.config = config
        self.format_checker = build_format_checker()
        self._registry: Registry = Registry()
        self._schema_ids: List[str] = []
        self._compiled: Dict[str, Callable[[Any], bool]] = {}

    @property
    def schema_ids(self) -> List[str]:
        return list(self._schema_ids)

    def __contains__(self, schema_id: str) -> bool:
        return self.resolve(schema_id) is not None

    def load(self, root_directory: Union[str, Path]) -> None:
        """Load meta-schemas, then every schema file below ``root_directory``."""
        schema_dir = Path(root_directory)
        for meta_schema in self.config.meta_schemas:
            self.load_meta_schema(schema_dir, meta_schema)

        if not schema_dir.is_dir():
            logger.warning(f"Schema directory not found: {schema_dir}")
            return

        files = sorted(
            path for path in schema_dir.rglob("*")
            if path.is_file() and path.suffix in self.config.schema_extensions
        )
        for file_path in files:
            self.register_file(file_path, schema_dir)
        logger.info(f"Loaded {len(self._schema_ids)} schemas from {schema_dir}")

    def load_meta_schema(self, schema_dir: Path, relative_path: str) -> bool:
        meta_path = schema_dir / relative_path
        try:
            schema = load_schema_file(meta_path)
        except SchemaLoadError as e:
            logger.error(f"Failed to load meta-schema from {relative_path}: {e}")
            return False
        schema_id = self._declared_id(schema) or "/" + relative_path
        if self.register(schema, schema_id):
            logger.info(f"Loaded meta-schema: {schema_id}")
            return True
        return False

    def register_file(self, file_path: Path, schema_dir: Path) -> bool:
        """Parse and register one schema file; a bad file is logged and skipped."""
        try:
            schema = load_schema_file(file_path)
        except SchemaLoadError as e:
            logger.error(f"Failed to parse schema at {file_path}: {e}")
            return False
        fallback_id = "/" + file_path.relative_to(schema_dir).as_posix()
        schema_id = self._declared_id(schema) or fallback_id
        if self.register(schema, schema_id):
            logger.debug(f"Loaded schema: {schema_id}")
            return True
        return False

    def register(self, schema: Any, schema_id: str) -> bool:
        if not isinstance(schema, Mapping):
            logger.error(f"Schema '{schema_id}' is not a mapping, skipping")
            return False
        uri = normalize_schema_id(schema_id)
        try:
            resource = DRAFT7.create_resource(schema)
            self._registry = self._registry.with_resource(uri, resource)
        except Exception as e:
            logger.error(f"Failed to register schema '{schema_id}': {e}")
            return False
        if uri not in self._schema_ids:
            self._schema_ids.append(uri)
        self._compiled.clear()
        return True

    def resolve(self, schema_id: str) -> Optional[Any]:
        """Raw schema for an identifier (fragments honoured), or None."""
        located = self.lookup(schema_id)
        return located.contents if located is not None else None

    def lookup(self, ref: str, base_uri: str = "") -> Optional[LocatedSchema]:
        """Resolve ``ref`` relative to ``base_uri`` into a located schema."""
        target = urljoin(base_uri, ref) if base_uri else ref
        try:
            resolved = self._registry.resolver(base_uri=base_uri).lookup(ref)
        except Unresolvable as e:
            logger.warning(f"Unresolved schema reference '{ref}' (base '{base_uri}'): {e}")
            return None
        document_uri, fragment = urldefrag(target)
        return LocatedSchema(contents=resolved.contents, base_uri=document_uri, pointer=fragment)

    def compile(self, schema: Any) -> Callable[[Any], bool]:
        validator = Draft7Validator(schema, registry=self._registry, format_checker=self.format_checker)
        return validator.is_valid

    def compile_located(self, located: LocatedSchema) -> Callable[[Any], bool]:
        """Compile a schema addressed by URI so its relative references keep working."""
        uri = located.uri
        if uri not in self._compiled:
            self._compiled[uri] = self.compile({"$ref": uri})
        return self._compiled[uri]

    def validate(self, schema_id: str, value: Any) -> List[SchemaError]:
        """Validate a whole document value, collecting every error.

        Raises:
            SchemaNotFoundError: If ``schema_id`` is not registered
        """
        if self.resolve(schema_id) is None:
            raise SchemaNotFoundError(schema_id)
        validator = Draft7Validator(
            {"$ref": schema_id}, registry=self._registry, format_checker=self.format_checker
        )
        errors: List[SchemaError] = []
        for error in validator.iter_errors(value):
            errors.extend(_to_schema_errors(error))
        return errors

    @staticmethod
    def _declared_id(schema: Any) -> Optional[str]:
        if isinstance(schema, Mapping):
            declared = schema.get("$id")
            if isinstance(declared, str) and declared:
                return declared
        return None


def _to_schema_errors(error: ValidationError) -> Iterator[SchemaError]:
    pointer = instance_pointer(error.absolute_path)
    keyword = str(error.validator)

    if keyword == "required" and isinstance(error.instance, Mapping):
        yield SchemaError(
            instance_path=pointer,
            keyword=keyword,
            message=error.message,
            params={"missingProperty": _missing_property(error)},
        )
        return

    if keyword == "additionalProperties" and error.validator_value is False and isinstance(error.instance, Mapping):
        extras = list(_additional_properties(error.instance, error.schema))
        for extra in extras:
            yield SchemaError(
                instance_path=pointer,
                keyword=keyword,
                message="must NOT have additional properties",
                params={"additionalProperty": extra},
            )
        if extras:
            return

    yield SchemaError(instance_path=pointer, keyword=keyword, message=error.message)


def _missing_property(error: ValidationError) -> Optional[str]:
    missing = [prop for prop in error.validator_value if prop not in error.instance]
    for prop in missing:
        if error.message == f"{prop!r} is a required property":
            return prop
    return missing[0] if missing else None


def _additional_properties(instance: Mapping, schema: Mapping) -> Iterator[str]:
    properties = schema.get("properties", {})
    patterns = "|".join(schema.get("patternProperties", {}))
    for prop in instance:
        if prop in properties:
            continue
        if patterns and re.search(patterns, prop):
            continue
        yield prop
