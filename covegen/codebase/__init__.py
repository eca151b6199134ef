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

"""Source discovery and structural symbol extraction."""

from covegen.codebase.ignore_patterns import (
    DEPENDENCY_DIR,
    SOURCE_EXTENSIONS,
    IgnoreRules,
    PathFilter,
    is_source_file,
    is_test_or_config_file,
)
from covegen.codebase.symbol_extractor import SymbolExtractor
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
    detect_language,
    get_parser,
    parse_file,
    parse_source,
)

__all__ = [
    # Path filtering
    "DEPENDENCY_DIR",
    "SOURCE_EXTENSIONS",
    "IgnoreRules",
    "PathFilter",
    "is_source_file",
    "is_test_or_config_file",
    # Parsing
    "SyntaxTree",
    "detect_language",
    "get_parser",
    "parse_file",
    "parse_source",
    # Symbols
    "ANONYMOUS_CLASS",
    "GLOBAL_SCOPE",
    "CallableSymbol",
    "ClassGroup",
    "SourceRange",
    "SymbolExtractor",
    "SyntacticForm",
]
