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

"""Navigation tree node types.

Each kind of node is its own immutable dataclass carrying only the data
that kind needs. Nodes are rebuilt on every expansion and never updated
in place.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from covegen.codebase.symbols import CallableSymbol, SourceRange
from covegen.coverage.visualizer import coverage_description, coverage_tooltip

ROOT_IDENTITY = "testable_codes_root"


class NodeKind(Enum):
    """Kinds of node in the testable-code tree."""

    ROOT = "root"
    PROJECT = "project"
    FOLDER = "folder"
    FILE = "file"
    CLASS_GROUP = "class"
    CALLABLE = "method"


class CallableIcon(Enum):
    """Icon category of a callable node."""

    CONSTRUCTOR = "constructor"
    PRIVATE = "private"
    ARROW = "arrow"
    METHOD = "method"


def callable_icon(symbol: CallableSymbol) -> CallableIcon:
    """Pick the icon category for a callable from its label and shape."""
    label = symbol.label
    if label.startswith("constructor"):
        return CallableIcon.CONSTRUCTOR
    if label.startswith("_") or label.startswith("#"):
        return CallableIcon.PRIVATE
    if symbol.is_arrow or "=>" in label or "callback" in label:
        return CallableIcon.ARROW
    return CallableIcon.METHOD


@dataclass(frozen=True)
class RootNode:
    label: str = "TESTABLE CODES"

    kind: ClassVar[NodeKind] = NodeKind.ROOT
    expandable: ClassVar[bool] = True

    @property
    def identity(self) -> str:
        return ROOT_IDENTITY


@dataclass(frozen=True)
class ProjectNode:
    label: str
    path: str

    kind: ClassVar[NodeKind] = NodeKind.PROJECT
    expandable: ClassVar[bool] = True

    @property
    def identity(self) -> str:
        return self.path


@dataclass(frozen=True)
class FolderNode:
    label: str
    path: str

    kind: ClassVar[NodeKind] = NodeKind.FOLDER
    expandable: ClassVar[bool] = True

    @property
    def identity(self) -> str:
        return self.path

    @property
    def tooltip(self) -> str:
        return f"📁 {self.path}"


@dataclass(frozen=True)
class FileNode:
    label: str
    path: str
    coverage: Optional[int] = None

    kind: ClassVar[NodeKind] = NodeKind.FILE
    expandable: ClassVar[bool] = True

    @property
    def identity(self) -> str:
        return self.path

    @property
    def description(self) -> str:
        """Coverage badge, empty when the file has no coverage data."""
        return coverage_description(self.coverage) if self.coverage is not None else ""

    @property
    def tooltip(self) -> str:
        if self.coverage is None:
            return f"📄 {self.path}"
        return coverage_tooltip(self.coverage)


@dataclass(frozen=True)
class ClassGroupNode:
    label: str
    path: str

    kind: ClassVar[NodeKind] = NodeKind.CLASS_GROUP
    expandable: ClassVar[bool] = True

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.path, self.label)


@dataclass(frozen=True)
class CallableNode:
    symbol: CallableSymbol
    path: str

    kind: ClassVar[NodeKind] = NodeKind.CALLABLE
    expandable: ClassVar[bool] = False

    @property
    def label(self) -> str:
        return self.symbol.label

    @property
    def identity(self) -> Tuple[str, SourceRange]:
        return (self.path, self.symbol.source_range)

    @property
    def icon(self) -> CallableIcon:
        return callable_icon(self.symbol)

    @property
    def description(self) -> str:
        return os.path.basename(self.path)

    @property
    def tooltip(self) -> str:
        return f"🔧 {self.label} in {os.path.basename(self.path)}"


NavigationNode = Union[RootNode, ProjectNode, FolderNode, FileNode, ClassGroupNode, CallableNode]
