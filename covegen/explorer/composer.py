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

"""On-demand testable-code hierarchy.

The tree is never stored. Each ``get_children`` call recomputes one level
from the filesystem and from a fresh parse of the file involved:

    Root -> Project -> (Folder | File)* -> ClassGroup* -> Callable*

Only coverage percentages are cached, in the shared ``CoverageCache``,
and they change only when ``refresh`` is awaited.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from covegen.codebase.ignore_patterns import IgnoreRules, PathFilter
from covegen.codebase.symbol_extractor import SymbolExtractor
from covegen.config import ExplorerConfig, get_config_manager
from covegen.coverage.aggregator import CoverageCache
from covegen.coverage.protocol import normalize_path
from covegen.explorer.nodes import (
    CallableNode,
    ClassGroupNode,
    FileNode,
    FolderNode,
    NavigationNode,
    NodeKind,
    ProjectNode,
    RootNode,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class HierarchyComposer:
    """Produces the children of any node in the testable-code tree."""

    def __init__(
        self,
        workspace_root: Union[str, Path],
        config: Optional[ExplorerConfig] = None,
        coverage: Optional[CoverageCache] = None,
        path_filter: Optional[PathFilter] = None,
        extractor: Optional[SymbolExtractor] = None,
    ):
        """Initialize the composer.

        Args:
            workspace_root: Root directory of the workspace
            config: Explorer configuration; read from ``covegen.json`` if omitted
            coverage: Shared coverage cache; a new empty one if omitted
            path_filter: Filter for directory entries; built from config if omitted
            extractor: Symbol extractor
        """
        self.workspace_root = normalize_path(workspace_root)
        self.config = config or get_config_manager().get_config(Path(self.workspace_root))
        self.coverage = coverage if coverage is not None else CoverageCache(self.config)
        self.path_filter = path_filter or PathFilter(
            Path(self.workspace_root),
            ignore_rules=IgnoreRules.from_workspace(Path(self.workspace_root), self.config.ignore_file),
            extra_skip_dirs=self.config.skip_dirs,
        )
        self.extractor = extractor or SymbolExtractor()
        self._listeners: List[ChangeListener] = []
        self._expanders: Dict[NodeKind, Callable[..., List[NavigationNode]]] = {
            NodeKind.ROOT: self._root_children,
            NodeKind.PROJECT: self._folder_children,
            NodeKind.FOLDER: self._folder_children,
            NodeKind.FILE: self._file_children,
            NodeKind.CLASS_GROUP: self._group_children,
        }

    @property
    def project_name(self) -> str:
        return os.path.basename(self.workspace_root) or "Project"

    def get_children(self, node: Optional[NavigationNode] = None) -> List[NavigationNode]:
        """Return the children of a node; the root node when called without one."""
        if node is None:
            return [RootNode(label=self.config.root_label)]

        expander = self._expanders.get(node.kind)
        if expander is None:
            return []
        return expander(node)

    async def refresh(self) -> None:
        """Re-aggregate coverage, then tell listeners to redraw."""
        await self.coverage.refresh(self.workspace_root)
        self._notify()

    def get_file_coverage(self, file_path: Union[str, Path]) -> Optional[int]:
        return self.coverage.get_coverage(file_path)

    def should_skip_generation(self, file_path: Union[str, Path]) -> bool:
        """Check whether test generation can be skipped for a well-covered file."""
        return self.coverage.meets_threshold(file_path, self.config.coverage_threshold)

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a redraw listener.

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Tree change listener error: {e}")

    def _root_children(self, node: RootNode) -> List[NavigationNode]:
        return [ProjectNode(label=self.project_name, path=self.workspace_root)]

    def _folder_children(self, node: Union[ProjectNode, FolderNode]) -> List[NavigationNode]:
        folders, files = self.path_filter.list_entries(Path(node.path))

        children: List[NavigationNode] = [
            FolderNode(label=folder.name, path=normalize_path(folder)) for folder in folders
        ]
        for file_path in files:
            path = normalize_path(file_path)
            children.append(
                FileNode(label=file_path.name, path=path, coverage=self.coverage.get_coverage(path))
            )
        return children

    def _file_children(self, node: FileNode) -> List[NavigationNode]:
        return [
            ClassGroupNode(label=group.name, path=node.path)
            for group in self.extractor.class_groups_for_file(node.path)
        ]

    def _group_children(self, node: ClassGroupNode) -> List[NavigationNode]:
        return [
            CallableNode(symbol=symbol, path=node.path)
            for symbol in self.extractor.methods_for_file(node.path, node.label)
        ]
