from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import quote


@dataclass(frozen=True)
class ReferenceSchema:
    ref: str
    raw: Mapping[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class DisjunctionSchema:
    options: Tuple[Any, ...]
    raw: Mapping[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class ObjectSchema:
    properties: Mapping[str, Any]
    raw: Mapping[str, Any] = field(repr=False, compare=False)

    def property_type(self, name: str) -> Optional[str]:
        prop = self.properties.get(name)
        if not isinstance(prop, Mapping):
            return None
        declared = prop.get("type")
        if isinstance(declared, list):
            return " | ".join(str(t) for t in declared)
        if declared is not None:
            return str(declared)
        if "$ref" in prop:
            return str(prop["$ref"])
        return None

    def property_description(self, name: str) -> Optional[str]:
        prop = self.properties.get(name)
        if not isinstance(prop, Mapping):
            return None
        description = prop.get("description")
        return str(description) if description is not None else None


@dataclass(frozen=True)
class ArraySchema:
    items: Any
    raw: Mapping[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class ScalarSchema:
    type: Optional[Any]
    raw: Any = field(repr=False, compare=False)


SchemaNode = Union[ReferenceSchema, DisjunctionSchema, ObjectSchema, ArraySchema, ScalarSchema]


def _declares_type(raw: Mapping[str, Any], type_name: str) -> bool:
    declared = raw.get("type")
    if isinstance(declared, list):
        return type_name in declared
    return declared == type_name


def classify_schema(raw: Any) -> SchemaNode:
    """Tag a raw schema mapping; ``$ref`` wins over ``oneOf`` wins over shape."""
    if not isinstance(raw, Mapping):
        # boolean schemas and malformed entries
        return ScalarSchema(type=None, raw=raw)

    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceSchema(ref=ref, raw=raw)

    options = raw.get("oneOf")
    if isinstance(options, list):
        return DisjunctionSchema(options=tuple(options), raw=raw)

    if _declares_type(raw, "object"):
        properties = raw.get("properties")
        return ObjectSchema(properties=properties if isinstance(properties, Mapping) else {}, raw=raw)

    if _declares_type(raw, "array"):
        return ArraySchema(items=raw.get("items"), raw=raw)

    return ScalarSchema(type=raw.get("type"), raw=raw)


def escape_pointer_token(token: Any) -> str:
    """JSON Pointer escaping plus percent-encoding for use in a URI fragment."""
    escaped = str(token).replace("~", "~0").replace("/", "~1")
    return quote(escaped, safe="~")


@dataclass(frozen=True)
class LocatedSchema:
    """Schema contents together with the URI that addresses them in the registry."""
    contents: Any
    base_uri: str
    pointer: str = ""

    @property
    def uri(self) -> str:
        return f"{self.base_uri}#{self.pointer}"

    def child(self, *tokens: Union[str, int]) -> "LocatedSchema":
        contents = self.contents
        for token in tokens:
            contents = contents[token]
        pointer = self.pointer + "".join("/" + escape_pointer_token(token) for token in tokens)
        return LocatedSchema(contents=contents, base_uri=self.base_uri, pointer=pointer)

    @property
    def node(self) -> SchemaNode:
        return classify_schema(self.contents)


def property_names(schema: ObjectSchema) -> Tuple[str, ...]:
    return tuple(str(name) for name in schema.properties)


def schema_summary(located: Optional[LocatedSchema]) -> Dict[str, Any]:
    """Small description of a resolved schema, used in debug logging."""
    if located is None:
        return {"resolved": False}
    node = located.node
    return {"resolved": True, "uri": located.uri, "kind": type(node).__name__}
