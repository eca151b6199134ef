# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
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

"""Plain-text rendering of the testable-code tree."""

from typing import List, Optional

from covegen.explorer.composer import HierarchyComposer
from covegen.explorer.nodes import CallableNode, FileNode, NavigationNode

INDENT = "  "


def format_node(node: NavigationNode, show_coverage: bool = True) -> str:
    """Single-line text for one node."""
    if isinstance(node, FileNode) and show_coverage and node.description:
        return f"{node.label}  {node.description}"
    if isinstance(node, CallableNode):
        return f"{node.label}  [{node.icon.value}] {node.symbol.source_range}"
    return node.label


def render_tree(
    composer: HierarchyComposer,
    depth: Optional[int] = None,
    show_coverage: bool = True,
) -> str:
    """Expand the tree from the root and render it as indented text.

    Args:
        composer: Composer that produces the children of each node
        depth: Maximum depth to expand below the root (None for unlimited)
        show_coverage: Whether to append coverage badges to files

    Returns:
        Rendered tree, one node per line
    """
    lines: List[str] = []

    def visit(node: NavigationNode, level: int) -> None:
        lines.append(f"{INDENT * level}{format_node(node, show_coverage)}")
        if not node.expandable or (depth is not None and level >= depth):
            return
        for child in composer.get_children(node):
            visit(child, level + 1)

    for root in composer.get_children():
        visit(root, 0)

    return "\n".join(lines)
