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

"""Mapping between cursor offsets, structural paths and document nodes."""

from typing import List, Optional

from ..models.document import (
    DocumentMapping,
    DocumentNode,
    DocumentSequence,
    PathSegment,
    SourceRange,
    StructuralPath,
)


def _covers(node_range: SourceRange, offset: int, end_of_document: int) -> bool:
    # block nodes still open at end of input share its end mark
    if offset == end_of_document:
        return node_range.end == end_of_document and node_range.start < offset
    return node_range.contains(offset)


def path_at_offset(root: Optional[DocumentNode], offset: int) -> StructuralPath:
    """Structural path of the innermost node containing ``offset``.

    An offset inside a mapping key yields the path of the mapping owning the
    key; an offset inside a value descends into it with the key appended.
    A cursor at the very end of the document belongs to the innermost node
    that is still open there, so typing on a trailing indented line resolves
    to the block being written.
    """
    if root is None:
        return ()
    end_of_document = root.range.end
    if not _covers(root.range, offset, end_of_document):
        return ()

    path: List[PathSegment] = []
    node = root
    while True:
        child = None
        if isinstance(node, DocumentMapping):
            for key_node, value_node in node.pairs:
                if _covers(key_node.range, offset, end_of_document):
                    return tuple(path)
                if _covers(value_node.range, offset, end_of_document):
                    path.append(key_node.text)
                    child = value_node
                    break
        elif isinstance(node, DocumentSequence):
            for index, item in enumerate(node.items):
                if _covers(item.range, offset, end_of_document):
                    path.append(index)
                    child = item
                    break

        if child is None:
            return tuple(path)
        node = child


def child_node(node: Optional[DocumentNode], segment: PathSegment) -> Optional[DocumentNode]:
    """Direct child of ``node`` for one path segment, or None on any mismatch."""
    if isinstance(segment, bool):
        return None
    if isinstance(segment, str):
        if not isinstance(node, DocumentMapping):
            return None
        return node.get(segment)
    if isinstance(segment, int):
        if not isinstance(node, DocumentSequence):
            return None
        if 0 <= segment < len(node.items):
            return node.items[segment]
    return None


def node_at_path(root: Optional[DocumentNode], path: StructuralPath) -> Optional[DocumentNode]:
    node = root
    for segment in path:
        node = child_node(node, segment)
        if node is None:
            return None
    return node


def range_at_path(root: Optional[DocumentNode], path: StructuralPath) -> Optional[SourceRange]:
    node = node_at_path(root, path)
    return node.range if node is not None else None


def path_from_pointer(root: Optional[DocumentNode], pointer: str) -> StructuralPath:
    """Turn a slash-delimited instance path into a structural path.

    Tokens become integer indices only where the document holds a sequence at
    that prefix, so mapping keys that look numeric stay strings.
    """
    tokens = [
        token.replace("~1", "/").replace("~0", "~")
        for token in pointer.split("/")
        if token != ""
    ]
    path: List[PathSegment] = []
    node = root
    for token in tokens:
        segment: PathSegment = token
        if isinstance(node, DocumentSequence) and token.isdigit():
            segment = int(token)
        path.append(segment)
        node = child_node(node, segment)
    return tuple(path)
