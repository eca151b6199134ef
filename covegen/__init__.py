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

"""Covegen Package.

Testable-code explorer for JavaScript and TypeScript workspaces, providing:
- A navigable tree of folders, source files, classes and callables
- Callable extraction from tree-sitter syntax trees
- Coverage merged from Cobertura, JaCoCo and LCOV reports

Package Structure:
    config.py                 - Project configuration (covegen.json)
    errors.py                 - Error types
    cli.py                    - Command line interface
    codebase/                 - Path filtering, parsing and symbol extraction
    coverage/                 - Coverage report parsers and cache
    explorer/                 - Tree nodes, composer and text rendering

Usage:
    import asyncio
    from covegen import HierarchyComposer

    composer = HierarchyComposer("/path/to/workspace")
    asyncio.run(composer.refresh())

    root = composer.get_children()[0]
    project = composer.get_children(root)[0]
    for node in composer.get_children(project):
        print(node.label)
"""

__version__ = "0.1.0"

from covegen.codebase.symbol_extractor import SymbolExtractor
from covegen.codebase.ignore_patterns import PathFilter
from covegen.config import ExplorerConfig, get_config_manager
from covegen.coverage.aggregator import CoverageCache
from covegen.errors import CovegenError, FilesystemError, ParseError, ReportReadError
from covegen.explorer.composer import HierarchyComposer

__all__ = [
    "__version__",
    # Tree
    "HierarchyComposer",
    "PathFilter",
    "SymbolExtractor",
    "CoverageCache",
    # Configuration
    "ExplorerConfig",
    "get_config_manager",
    # Errors
    "CovegenError",
    "FilesystemError",
    "ParseError",
    "ReportReadError",
]
