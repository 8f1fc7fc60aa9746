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

"""Resolve the schema that applies at a structural path of a live document."""

import logging
from typing import Any, List, Optional, Set, Tuple

from referencing.exceptions import Unresolvable

from ..config import validator_config
from ..models.document import DocumentNode, PathSegment, StructuralPath
from ..models.schema_nodes import (
    ArraySchema,
    DisjunctionSchema,
    LocatedSchema,
    ObjectSchema,
    ReferenceSchema,
    schema_summary,
)
from ..parsers.document_navigator import child_node
from ..schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

_NO_VALUE = object()
_UNSET = object()


class SchemaResolver:
    """Walks a schema graph in lock-step with a document path.

    At every step references are expanded first, then a ``oneOf`` branch is
    chosen against the document value at the consumed prefix, and only then
    is the next path segment navigated.
    """

    def __init__(self, registry: SchemaRegistry, max_depth: Optional[int] = None):
        self.registry = registry
        self.max_depth = max_depth if max_depth is not None else validator_config.max_resolution_depth

    def resolve(
        self,
        schema_id: str,
        path: StructuralPath,
        document_root: Optional[DocumentNode],
    ) -> Optional[LocatedSchema]:
        """Most specific schema reachable along ``path``.

        Returns None when the root schema is unknown, when no ``oneOf`` branch
        matches the document, or when a reference cycle is found. A segment
        that cannot be navigated ends the walk with the schema reached so far.
        """
        current = self.registry.lookup(schema_id)
        if current is None:
            return None
        return self.resolve_located(current, path, document_root)

    def resolve_located(
        self,
        root_schema: LocatedSchema,
        path: StructuralPath,
        document_root: Optional[DocumentNode],
    ) -> Optional[LocatedSchema]:
        current = root_schema
        document_node = document_root
        for segment in path:
            current = self.settle(current, document_node)
            if current is None:
                return None
            step = self._navigate(current, segment)
            if step is None:
                logger.debug(f"Cannot navigate '{segment}' from {current.uri}")
                return current
            current = step
            document_node = child_node(document_node, segment)

        resolved = self.settle(current, document_node)
        logger.debug(f"Resolved {list(path)}: {schema_summary(resolved)}")
        return resolved

    def settle(self, located: LocatedSchema, document_node: Optional[DocumentNode]) -> Optional[LocatedSchema]:
        """Expand references and pick disjunction branches until neither applies."""
        visited: Set[str] = set()
        value: Any = _UNSET

        for _ in range(self.max_depth):
            node = located.node
            if isinstance(node, ReferenceSchema):
                resolved = self.registry.lookup(node.ref, located.base_uri)
                if resolved is None:
                    # unresolved references surface as a dead end
                    return located
                if resolved.uri in visited:
                    logger.warning(f"Reference cycle detected at '{resolved.uri}'")
                    return None
                visited.add(resolved.uri)
                located = resolved
            elif isinstance(node, DisjunctionSchema):
                if value is _UNSET:
                    value = document_node.to_plain() if document_node is not None else _NO_VALUE
                chosen = self._select_option(located, node, value)
                if chosen is None:
                    return None
                located = chosen
            else:
                return located

        logger.warning(f"Schema resolution exceeded depth {self.max_depth} at '{located.uri}'")
        return None

    def _select_option(
        self,
        located: LocatedSchema,
        node: DisjunctionSchema,
        value: Any,
    ) -> Optional[LocatedSchema]:
        if value is _NO_VALUE:
            logger.debug(f"No document value to disambiguate oneOf at {located.uri}")
            return None

        for index in range(len(node.options)):
            candidate = located.child("oneOf", index)
            if self.expands_to_cycle(candidate):
                logger.warning(f"Skipping oneOf branch {candidate.uri}: reference cycle")
                continue
            try:
                matches = self.registry.compile_located(candidate)(value)
            except (Unresolvable, RecursionError) as e:
                logger.warning(f"Skipping oneOf branch {candidate.uri}: {e!r}")
                continue
            if matches:
                return candidate

        logger.debug(f"No oneOf branch of {located.uri} matches the document value")
        return None

    def expands_to_cycle(self, start: LocatedSchema) -> bool:
        """Whether following ``$ref`` and ``oneOf`` from ``start`` can come back to a schema on the way.

        Such a schema never consumes part of the value, so validating
        against it recurses forever.
        """
        on_path: Set[str] = set()
        finished: Set[str] = set()
        stack: List[Tuple[LocatedSchema, bool]] = [(start, False)]
        while stack:
            located, leaving = stack.pop()
            uri = located.uri
            if leaving:
                on_path.discard(uri)
                finished.add(uri)
                continue
            if uri in on_path:
                return True
            if uri in finished:
                continue
            on_path.add(uri)
            stack.append((located, True))
            stack.extend((step, False) for step in self._expansions(located))
        return False

    def _expansions(self, located: LocatedSchema) -> List[LocatedSchema]:
        node = located.node
        if isinstance(node, ReferenceSchema):
            target = self.registry.lookup(node.ref, located.base_uri)
            return [target] if target is not None else []
        if isinstance(node, DisjunctionSchema):
            return [located.child("oneOf", index) for index in range(len(node.options))]
        return []

    @staticmethod
    def _navigate(located: LocatedSchema, segment: PathSegment) -> Optional[LocatedSchema]:
        node = located.node
        if isinstance(segment, str):
            if isinstance(node, ObjectSchema) and segment in node.properties:
                return located.child("properties", segment)
            return None

        if isinstance(node, ArraySchema):
            if isinstance(node.items, list):
                if 0 <= segment < len(node.items):
                    return located.child("items", segment)
                return None
            if node.items is not None:
                return located.child("items")
        return None
