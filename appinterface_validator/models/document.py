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

"""Parsed YAML document nodes with source ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

PathSegment = Union[str, int]
StructuralPath = Tuple[PathSegment, ...]


@dataclass(frozen=True)
class SourceRange:
    """Half-open character interval ``[start, end)`` into the document text."""
    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True)
class DocumentScalar:
    range: SourceRange
    value: Any
    # literal source text of the scalar (used for mapping keys)
    text: str = ""

    def to_plain(self, memo: Optional[Dict[int, Any]] = None) -> Any:
        return self.value


@dataclass(frozen=True)
class DocumentSequence:
    range: SourceRange
    items: Tuple["DocumentNode", ...] = ()

    def to_plain(self, memo: Optional[Dict[int, Any]] = None) -> List[Any]:
        """Plain list; aliased nodes map to one shared object, as with ``yaml.safe_load``."""
        memo = {} if memo is None else memo
        if id(self) not in memo:
            memo[id(self)] = [item.to_plain(memo) for item in self.items]
        return memo[id(self)]


@dataclass(frozen=True)
class DocumentMapping:
    range: SourceRange
    pairs: Tuple[Tuple[DocumentScalar, "DocumentNode"], ...] = ()

    def keys(self) -> List[str]:
        return [key.text for key, _ in self.pairs]

    def get(self, key: str) -> Optional["DocumentNode"]:
        """Value of the first pair whose key literal equals ``key``."""
        for key_node, value_node in self.pairs:
            if key_node.text == key:
                return value_node
        return None

    def to_plain(self, memo: Optional[Dict[int, Any]] = None) -> Dict[str, Any]:
        memo = {} if memo is None else memo
        if id(self) not in memo:
            memo[id(self)] = {key_node.text: value_node.to_plain(memo) for key_node, value_node in self.pairs}
        return memo[id(self)]


DocumentNode = Union[DocumentMapping, DocumentSequence, DocumentScalar]


@dataclass(frozen=True)
class ParsedDocument:
    """Result of parsing one text buffer; owns its whole node tree."""
    text: str
    root: Optional[DocumentNode]

    def schema_id(self, schema_field: str) -> Optional[str]:
        """Declared schema identifier from the reserved top-level field."""
        if not isinstance(self.root, DocumentMapping):
            return None
        node = self.root.get(schema_field)
        if not isinstance(node, DocumentScalar) or node.value is None:
            return None
        return str(node.value)
