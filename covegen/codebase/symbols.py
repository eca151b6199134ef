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

"""Callable symbol data types.

Defines the structures produced by the symbol extractor: callable units,
their source ranges, and the class groups they are sorted into.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from tree_sitter import Node

GLOBAL_SCOPE = "Global Scope"
ANONYMOUS_CLASS = "Anonymous Class"


class SyntacticForm(Enum):
    """Syntactic shape of a callable unit."""

    DECLARATION = "declaration"  # function declaration or `var` holding arrows
    METHOD = "method"  # class/object method definition
    ARROW = "arrow"  # arrow function in any position
    EXPRESSION = "unnamed_expression"  # function expression


@dataclass(frozen=True, order=True)
class SourceRange:
    """Half-open source range with 0-based lines and columns."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def from_node(cls, node: "Node") -> "SourceRange":
        return cls(
            start_line=node.start_point[0],
            start_column=node.start_point[1],
            end_line=node.end_point[0],
            end_column=node.end_point[1],
        )

    @property
    def start(self) -> Tuple[int, int]:
        return (self.start_line, self.start_column)

    def __str__(self) -> str:
        return f"{self.start_line + 1}:{self.start_column}-{self.end_line + 1}:{self.end_column}"


@dataclass(frozen=True)
class CallableSymbol:
    """One testable callable unit found in a source file."""

    label: str
    source_range: SourceRange
    syntactic_form: SyntacticForm
    owning_group: str
    node_type: str
    is_arrow: bool = False  # arrow function, or a `var` statement holding one


@dataclass
class ClassGroup:
    """Callables sharing a lexical class scope, or the global scope."""

    name: str
    symbols: List[CallableSymbol] = field(default_factory=list)

    @property
    def is_global(self) -> bool:
        return self.name == GLOBAL_SCOPE

    def __len__(self) -> int:
        return len(self.symbols)
