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

"""YAML parser producing document trees with per-node source ranges."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from ..exceptions import DocumentParseError, SchemaLoadError
from ..models.document import (
    DocumentMapping,
    DocumentNode,
    DocumentScalar,
    DocumentSequence,
    ParsedDocument,
    SourceRange,
)

logger = logging.getLogger(__name__)

# Scalars kept as source text so the plain value stays JSON-compatible.
_TEXT_TAGS = {
    "tag:yaml.org,2002:timestamp",
    "tag:yaml.org,2002:binary",
}

DEFAULT_MAX_DEPTH = 256
# Nodes a document may expand to once aliases are followed.
DEFAULT_MAX_NODES = 100_000


class YamlParser:
    """YAML parser built on PyYAML's composed node tree.

    ``yaml.compose`` keeps the start/end marks of every node, which gives the
    character ranges needed to anchor diagnostics and to map a cursor offset
    to a structural path.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, max_nodes: int = DEFAULT_MAX_NODES):
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    def parse(self, content: str) -> ParsedDocument:
        """Parse a YAML text buffer.

        Raises:
            DocumentParseError: If the content is not a single well-formed document
        """
        loader = yaml.SafeLoader(content)
        try:
            node = loader.get_single_node()
            root = self._build(loader, node) if node is not None else None
        except yaml.YAMLError as exc:
            raise DocumentParseError(f"Failed to parse YAML content: {exc}") from exc
        finally:
            loader.dispose()
        return ParsedDocument(text=content, root=root)

    def _build(self, loader: yaml.SafeLoader, root: yaml.Node) -> DocumentNode:
        # Post-order build on an explicit stack; each frame is (yaml node, depth, visited).
        built = {}
        # node count of each subtree with aliases expanded
        expanded: Dict[int, int] = {}
        stack: List[Tuple[yaml.Node, int, bool]] = [(root, 0, False)]
        while stack:
            node, depth, visited = stack.pop()
            if id(node) in built and not visited:
                continue
            if depth > self.max_depth:
                raise DocumentParseError(
                    f"Document nesting exceeds the maximum depth of {self.max_depth}"
                )

            if isinstance(node, yaml.ScalarNode):
                built[id(node)] = self._scalar(loader, node)
                expanded[id(node)] = 1
                continue

            if not visited:
                stack.append((node, depth, True))
                for child in self._children(node):
                    stack.append((child, depth + 1, False))
                continue

            node_range = SourceRange(node.start_mark.index, node.end_mark.index)
            if isinstance(node, yaml.SequenceNode):
                built[id(node)] = DocumentSequence(
                    range=node_range,
                    items=tuple(built[id(item)] for item in node.value),
                )
                expanded[id(node)] = 1 + sum(expanded[id(item)] for item in node.value)
            else:
                pairs = []
                size = 1
                for key_node, value_node in node.value:
                    if not isinstance(key_node, yaml.ScalarNode):
                        logger.debug(f"Skipping non-scalar mapping key at line {key_node.start_mark.line + 1}")
                        continue
                    pairs.append((built[id(key_node)], built[id(value_node)]))
                    size += expanded[id(key_node)] + expanded[id(value_node)]
                built[id(node)] = DocumentMapping(range=node_range, pairs=tuple(pairs))
                expanded[id(node)] = size

            if expanded[id(node)] > self.max_nodes:
                raise DocumentParseError(
                    f"Document expands to more than {self.max_nodes} nodes"
                )

        return built[id(root)]

    @staticmethod
    def _children(node: yaml.Node) -> List[yaml.Node]:
        if isinstance(node, yaml.SequenceNode):
            return list(node.value)
        children = []
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                children.append(key_node)
                children.append(value_node)
        return children

    @staticmethod
    def _scalar(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> DocumentScalar:
        if node.tag in _TEXT_TAGS or node.tag not in loader.yaml_constructors:
            value = node.value
        else:
            value = loader.construct_object(node)
        return DocumentScalar(
            range=SourceRange(node.start_mark.index, node.end_mark.index),
            value=value,
            text=node.value,
        )


def load_schema_file(path: Union[str, Path]) -> Any:
    """Load a schema file: JSON for ``.json`` files, YAML otherwise.

    Raises:
        SchemaLoadError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise SchemaLoadError(f"Failed to load schema file {path}: {exc}") from exc


# Global parser instance
yaml_parser = YamlParser()
