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

"""Callable-unit extraction from JavaScript/TypeScript syntax trees.

Walks a tree-sitter tree and records every function-like construct that a
test could target: function declarations, class methods, arrow functions
wherever they appear, function expressions, and ``var`` statements that
hold arrow functions. Each position is recorded once, keyed by its start
line and column.

Most of these constructs have no declared name, so labels are derived
from where the function sits. The rules are looked up by the type of the
parent node (see ``PARENT_LABEL_RULES``); anything unmatched is labelled
with a snippet of its first source line.

Example:
    >>> from covegen.codebase.tree_sitter_manager import parse_source
    >>> extractor = SymbolExtractor()
    >>> tree = parse_source(b"obj.onClick = () => {}", "javascript")
    >>> [s.label for s in extractor.extract_symbols(tree)]
    ['obj.onClick']
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Set, Tuple, Union

from covegen.codebase.symbols import (
    ANONYMOUS_CLASS,
    GLOBAL_SCOPE,
    CallableSymbol,
    ClassGroup,
    SourceRange,
    SyntacticForm,
)
from covegen.codebase.tree_sitter_manager import (
    SyntaxTree,
    descendants_of_type,
    parse_file,
    walk,
)
from covegen.errors import ParseError

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})

# `let`/`const` produce lexical_declaration; only `var` statements are wrappers
WRAPPER_NODE_TYPE = "variable_declaration"

CALLABLE_FORMS: Dict[str, SyntacticForm] = {
    "function_declaration": SyntacticForm.DECLARATION,
    "generator_function_declaration": SyntacticForm.DECLARATION,
    "method_definition": SyntacticForm.METHOD,
    "arrow_function": SyntacticForm.ARROW,
    "function_expression": SyntacticForm.EXPRESSION,
    "function": SyntacticForm.EXPRESSION,  # older grammars
    "generator_function": SyntacticForm.EXPRESSION,
    WRAPPER_NODE_TYPE: SyntacticForm.DECLARATION,
}

SNIPPET_LENGTH = 30
LAMBDA_GLYPH = "λ"


def node_text(node: Optional["Node"]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _compact(text: str) -> str:
    # Chained calls split over several lines: `promise\n  .then`
    return re.sub(r"\s*\n\s*", "", text).strip()


def _field_text(node: "Node", field_name: str) -> str:
    return _compact(node_text(node.child_by_field_name(field_name)))


def _is_field_value(node: "Node", parent: "Node", field_name: str) -> bool:
    value = parent.child_by_field_name(field_name)
    return value is not None and value.start_byte == node.start_byte and value.end_byte == node.end_byte


# ---------------------------------------------------------------------------
# Parent-context label rules
# ---------------------------------------------------------------------------


def _label_from_declarator(node: "Node", parent: "Node") -> str:
    return _field_text(parent, "name")


def _label_from_assignment(node: "Node", parent: "Node") -> str:
    if not _is_field_value(node, parent, "right"):
        return ""
    left = parent.child_by_field_name("left")
    if left is None:
        return ""
    if left.type == "member_expression":
        prop = _field_text(left, "property")
        obj = _field_text(left, "object")
        return f"{obj}.{prop}" if obj else prop
    return _compact(node_text(left))


def _label_from_class_field(node: "Node", parent: "Node") -> str:
    # javascript: field_definition(property:), typescript: public_field_definition(name:)
    return _field_text(parent, "property") or _field_text(parent, "name")


def _label_from_pair(node: "Node", parent: "Node") -> str:
    key = _field_text(parent, "key")
    if len(key) >= 2 and key[0] == key[-1] and key[0] in "'\"`":
        key = key[1:-1]
    return key


def _label_from_arguments(node: "Node", parent: "Node") -> str:
    call = parent.parent
    if call is None or call.type not in ("call_expression", "new_expression"):
        return "callback"

    callee = _field_text(call, "function") or _field_text(call, "constructor")
    if not callee:
        return "callback"

    arguments = [child for child in parent.named_children if child.type != "comment"]
    index = next(
        (i for i, arg in enumerate(arguments) if arg.start_byte == node.start_byte),
        0,
    )
    return f"{callee} callback[{index}]"


LabelRule = Callable[["Node", "Node"], str]

PARENT_LABEL_RULES: Dict[str, LabelRule] = {
    "variable_declarator": _label_from_declarator,
    "assignment_expression": _label_from_assignment,
    "field_definition": _label_from_class_field,
    "public_field_definition": _label_from_class_field,
    "pair": _label_from_pair,
    "arguments": _label_from_arguments,
}


class SymbolExtractor:
    """Extracts callable units and class groups from parsed source."""

    def extract_symbols(self, tree: SyntaxTree) -> List[CallableSymbol]:
        """Extract every callable unit in document order.

        Args:
            tree: Parsed source file

        Returns:
            Callable symbols, one per distinct start position
        """
        symbols: List[CallableSymbol] = []
        for node, form in self._find_callables(tree.root_node):
            symbols.append(
                CallableSymbol(
                    label=self.derive_label(node, tree),
                    source_range=SourceRange.from_node(node),
                    syntactic_form=form,
                    owning_group=self._owning_group(node),
                    node_type=node.type,
                    is_arrow=node.type in ("arrow_function", WRAPPER_NODE_TYPE),
                )
            )
        return symbols

    def extract_class_groups(self, tree: SyntaxTree) -> List[ClassGroup]:
        """Group the file's callables by enclosing class.

        Classes come in document order, followed by the global scope.
        Classes sharing a name share one group. Empty groups are dropped.
        """
        groups: Dict[str, ClassGroup] = {}
        for node in walk(tree.root_node):
            if node.is_named and node.type in CLASS_NODE_TYPES:
                name = self._class_name(node)
                groups.setdefault(name, ClassGroup(name=name))

        global_group = ClassGroup(name=GLOBAL_SCOPE)
        for symbol in self.extract_symbols(tree):
            group = groups.get(symbol.owning_group, global_group)
            group.symbols.append(symbol)

        result = [group for group in groups.values() if group.symbols]
        if global_group.symbols:
            result.append(global_group)
        return result

    def extract_methods(self, tree: SyntaxTree, group_name: str) -> List[CallableSymbol]:
        """Extract the callables belonging to one class group."""
        return [s for s in self.extract_symbols(tree) if s.owning_group == group_name]

    def class_groups_for_file(self, file_path: Union[str, Path]) -> List[ClassGroup]:
        """Parse a file and group its callables; unparsable files yield no groups."""
        tree = self._parse(file_path)
        return self.extract_class_groups(tree) if tree else []

    def methods_for_file(self, file_path: Union[str, Path], group_name: str) -> List[CallableSymbol]:
        """Parse a file and list one group's callables; unparsable files yield none."""
        tree = self._parse(file_path)
        return self.extract_methods(tree, group_name) if tree else []

    def derive_label(self, node: "Node", tree: SyntaxTree) -> str:
        """Derive a display label for a callable node.

        Tries the node's own declared name, then the rule registered for
        its parent's type, then falls back to a source snippet.
        """
        label = self._declared_name(node)
        if label:
            return label

        parent = node.parent
        if parent is not None:
            rule = PARENT_LABEL_RULES.get(parent.type)
            if rule is not None:
                label = rule(node, parent)
                if label:
                    return label

        return self._snippet_label(node, tree)

    def _find_callables(self, root: "Node") -> List[Tuple["Node", SyntacticForm]]:
        found: List[Tuple["Node", SyntacticForm]] = []
        processed: Set[Tuple[int, int]] = set()

        for node in walk(root):
            form = self._callable_form(node)
            if form is None:
                continue

            position = (node.start_point[0], node.start_point[1])
            if position in processed:
                continue

            processed.add(position)
            found.append((node, form))

        return found

    def _callable_form(self, node: "Node") -> Optional[SyntacticForm]:
        if not node.is_named:
            return None
        form = CALLABLE_FORMS.get(node.type)
        if form is None:
            return None
        if node.type == WRAPPER_NODE_TYPE and not self._contains_arrow(node):
            return None
        return form

    @staticmethod
    def _contains_arrow(node: "Node") -> bool:
        return next(descendants_of_type(node, "arrow_function"), None) is not None

    def _declared_name(self, node: "Node") -> str:
        if node.type == WRAPPER_NODE_TYPE:
            declarators = [
                child for child in node.named_children if child.type == "variable_declarator"
            ]
            holding_arrow = [d for d in declarators if self._contains_arrow(d)]
            chosen = (holding_arrow or declarators or [None])[0]
            return _field_text(chosen, "name") if chosen is not None else ""
        return _field_text(node, "name")

    @staticmethod
    def _snippet_label(node: "Node", tree: SyntaxTree) -> str:
        line = tree.line_text(node.start_point[0]).strip()
        snippet = line[:SNIPPET_LENGTH]
        if len(line) > SNIPPET_LENGTH:
            snippet += "..."
        return f"{LAMBDA_GLYPH} {snippet}"

    def _owning_group(self, node: "Node") -> str:
        parent = node.parent
        while parent is not None:
            if parent.is_named and parent.type in CLASS_NODE_TYPES:
                return self._class_name(parent)
            parent = parent.parent
        return GLOBAL_SCOPE

    @staticmethod
    def _class_name(node: "Node") -> str:
        return _field_text(node, "name") or ANONYMOUS_CLASS

    @staticmethod
    def _parse(file_path: Union[str, Path]) -> Optional[SyntaxTree]:
        try:
            return parse_file(file_path)
        except ParseError as e:
            logger.warning(str(e))
            return None
