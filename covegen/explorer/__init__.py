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

"""Testable-code tree.

Composes the Root / Project / Folder / File / ClassGroup / Callable
hierarchy on demand and renders it as text.
"""

from covegen.explorer.composer import HierarchyComposer
from covegen.explorer.nodes import (
    ROOT_IDENTITY,
    CallableIcon,
    CallableNode,
    ClassGroupNode,
    FileNode,
    FolderNode,
    NavigationNode,
    NodeKind,
    ProjectNode,
    RootNode,
    callable_icon,
)
from covegen.explorer.render import format_node, render_tree

__all__ = [
    # Nodes
    "ROOT_IDENTITY",
    "CallableIcon",
    "CallableNode",
    "ClassGroupNode",
    "FileNode",
    "FolderNode",
    "NavigationNode",
    "NodeKind",
    "ProjectNode",
    "RootNode",
    "callable_icon",
    # Composer
    "HierarchyComposer",
    # Rendering
    "format_node",
    "render_tree",
]
