"""Shared test fixtures."""

import json
import logging
from pathlib import Path

import pytest

from appinterface_validator.config import ValidatorConfig
from appinterface_validator.parsers.yaml_parser import YamlParser
from appinterface_validator.schema.registry import SchemaRegistry
from appinterface_validator.server.validation_engine import ValidationEngine

DRAFT_06 = {
    "$schema": "http://json-schema.org/draft-06/schema#",
    "$id": "http://json-schema.org/draft-06/schema#",
    "type": ["object", "boolean"],
}

METASCHEMA = {
    "$schema": "http://json-schema.org/draft-06/schema#",
    "type": "object",
    "required": ["$schema"],
}

COMMON = {
    "$schema": "/metaschema-1.json",
    "definitions": {
        "owner": {
            "type": "object",
            "additionalProperties": False,
            "required": ["name", "email"],
            "properties": {
                "name": {"type": "string", "description": "Owner name"},
                "email": {"type": "string"},
            },
        },
        "service": {
            "oneOf": [
                {
                    "type": "object",
                    "required": ["kind"],
                    "properties": {"kind": {"const": "a"}, "alpha": {"type": "string"}},
                },
                {
                    "type": "object",
                    "required": ["kind"],
                    "properties": {"kind": {"const": "b"}, "beta": {"type": "string"}},
                },
            ]
        },
    },
}

APP_SCHEMA = """\
---
"$schema": /metaschema-1.json
version: '1.0'
type: object
additionalProperties: false
properties:
  "$schema":
    type: string
    enum:
    - /app-1.yml
  name:
    type: string
    description: Application name
  description:
    type: string
  serviceOwners:
    type: array
    items:
      "$ref": "/common-1.json#/definitions/owner"
  endpoints:
    type: array
    items:
      oneOf:
      - type: object
        additionalProperties: false
        required:
        - url
        properties:
          url:
            type: string
            format: uri
          monitoring:
            type: boolean
      - type: object
        additionalProperties: false
        required:
        - path
        properties:
          path:
            type: string
          port:
            type: integer
  service:
    "$ref": "/common-1.json#/definitions/service"
required:
- "$schema"
- name
"""

VALID_APP = """\
---
$schema: /app-1.yml
name: payments
serviceOwners:
- name: Jane
  email: jane@example.com
endpoints:
- url: https://payments.example.com
  monitoring: true
- path: /health
  port: 8080
service:
  kind: b
  beta: x
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace root with a ``schemas`` directory in app-interface layout."""
    schema_dir = tmp_path / "schemas"
    (schema_dir / "app-sre").mkdir(parents=True)
    (schema_dir / "json-schema-spec-draft-06.json").write_text(json.dumps(DRAFT_06), encoding="utf-8")
    (schema_dir / "metaschema-1.json").write_text(json.dumps(METASCHEMA), encoding="utf-8")
    (schema_dir / "common-1.json").write_text(json.dumps(COMMON), encoding="utf-8")
    (schema_dir / "app-1.yml").write_text(APP_SCHEMA, encoding="utf-8")
    (schema_dir / "app-sre" / "team-1.yml").write_text(
        "---\n"
        "\"$schema\": /metaschema-1.json\n"
        "type: object\n"
        "properties:\n"
        "  a:\n"
        "    type: string\n"
        "  b:\n"
        "    type: integer\n"
        "  c:\n"
        "    type: boolean\n",
        encoding="utf-8",
    )
    (tmp_path / "data").mkdir()
    return tmp_path


@pytest.fixture
def config() -> ValidatorConfig:
    return ValidatorConfig()


@pytest.fixture
def registry(workspace: Path, config: ValidatorConfig) -> SchemaRegistry:
    schema_registry = SchemaRegistry(config)
    schema_registry.load(workspace / "schemas")
    return schema_registry


@pytest.fixture
def engine(registry: SchemaRegistry, config: ValidatorConfig) -> ValidationEngine:
    return ValidationEngine(registry, config)


@pytest.fixture
def parser() -> YamlParser:
    return YamlParser()


@pytest.fixture(autouse=True)
def isolate_root_logging():
    """Drop handlers installed by the CLI and server logging setup."""
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)
