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

"""Grammar loading and source parsing with tree-sitter.

Trees are not cached: every query re-parses the file, so the result always
reflects what is on disk. Language and parser objects are memoized per
process.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Union

from tree_sitter import Language, Parser

from covegen.errors import ParseError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = logging.getLogger(__name__)


# Format: "language_name": ("module_name", "function_name")
# function_name is the function that returns the Language object
LANGUAGE_MODULES: Dict[str, tuple] = {
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),  # TypeScript + JSX
}

EXTENSION_LANGUAGES: Dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

_language_cache: Dict[str, Language] = {}
_parser_cache: Dict[str, Parser] = {}


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed source file."""

    file_path: Path
    language: str
    source: bytes
    tree: "Tree"

    @property
    def root_node(self) -> "Node":
        return self.tree.root_node

    def line_text(self, row: int) -> str:
        """Text of a 0-based source line, without the line terminator."""
        lines = self.source.split(b"\n")
        if row < 0 or row >= len(lines):
            return ""
        return lines[row].decode("utf-8", errors="replace").rstrip("\r")


def detect_language(file_path: Union[str, Path]) -> Optional[str]:
    """Detect the grammar for a file from its extension."""
    ext = os.path.splitext(str(file_path))[1].lower()
    return EXTENSION_LANGUAGES.get(ext)


def get_language(language: str) -> Language:
    """Load a tree-sitter Language from its pre-compiled grammar package."""
    if language in _language_cache:
        return _language_cache[language]

    module_info = LANGUAGE_MODULES.get(language)
    if not module_info:
        raise ValueError(f"Unsupported language for tree-sitter: {language}")

    module_name, func_name = module_info

    try:
        language_module = __import__(module_name)
        lang_func = getattr(language_module, func_name)
        lang = Language(lang_func())
    except ImportError:
        raise ImportError(
            f"Language package '{module_name}' not installed. "
            f"Install it with: pip install {module_name.replace('_', '-')}"
        )
    except AttributeError:
        raise AttributeError(
            f"Language module '{module_name}' does not have function '{func_name}'. "
            f"Check the tree-sitter package version and update LANGUAGE_MODULES."
        )

    _language_cache[language] = lang
    return lang


def get_parser(language: str) -> Parser:
    """Return a tree-sitter Parser initialized with the specified language."""
    if language in _parser_cache:
        return _parser_cache[language]

    parser = Parser(get_language(language))
    _parser_cache[language] = parser
    return parser


def parse_source(source: bytes, language: str, file_path: Union[str, Path] = "<memory>") -> SyntaxTree:
    """Parse in-memory source text with the given grammar.

    Raises:
        ParseError: If the grammar is unavailable or no tree is produced
    """
    try:
        parser = get_parser(language)
    except (ImportError, AttributeError, ValueError) as e:
        raise ParseError(file_path, str(e)) from e

    tree = parser.parse(source)
    if tree is None:
        raise ParseError(file_path, "parser produced no tree")
    if tree.root_node.has_error:
        logger.debug(f"Syntax errors in {file_path}; using partial tree")

    return SyntaxTree(file_path=Path(file_path), language=language, source=source, tree=tree)


def parse_file(file_path: Union[str, Path]) -> SyntaxTree:
    """Read and parse a source file.

    Raises:
        ParseError: If the extension is not supported, the file cannot be
            read, or parsing fails
    """
    path = Path(file_path)
    language = detect_language(path)
    if language is None:
        raise ParseError(path, f"no grammar for '{path.suffix}' files")

    try:
        source = path.read_bytes()
    except OSError as e:
        raise ParseError(path, e.strerror or str(e)) from e

    return parse_source(source, language, path)


def walk(node: "Node") -> Iterator["Node"]:
    """Yield a node and all its descendants in depth-first pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def descendants_of_type(node: "Node", node_type: str) -> Iterator["Node"]:
    """Yield strict descendants of ``node`` with the given type."""
    for child in node.children:
        for descendant in walk(child):
            if descendant.type == node_type:
                yield descendant
