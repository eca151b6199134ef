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

"""Coverage data types.

Every supported report format is reduced to the same shape: one
``FileCoverage`` per source file, holding measured and covered line
counts, keyed by the file's absolute path.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union


class CoverageFormat(Enum):
    """Supported coverage report formats."""

    COBERTURA = "cobertura"  # XML: packages/package/classes/class/lines/line
    JACOCO = "jacoco"  # XML: report/package/sourcefile/line
    LCOV = "lcov"  # Text: SF/LF/LH/end_of_record records


def normalize_path(path: Union[str, Path]) -> str:
    """Absolute, normalized form of a path, used as the coverage map key."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def resolve_report_path(workspace_root: Union[str, Path], report_name: str) -> str:
    """Resolve a path taken from a report against the workspace root.

    Absolute report paths are kept as they are.
    """
    return normalize_path(os.path.join(normalize_path(workspace_root), report_name))


def round_percent(covered: int, total: int) -> int:
    """Percentage of covered lines, rounded half-up and clamped to [0, 100]."""
    if total <= 0:
        return 0
    # floor(100 * covered / total + 0.5) in integer arithmetic
    percent = (200 * covered + total) // (2 * total)
    return max(0, min(100, percent))


@dataclass
class FileCoverage:
    """Line coverage summary for a single file."""

    file_path: str
    total_lines: int
    covered_lines: int

    @property
    def percent(self) -> int:
        return round_percent(self.covered_lines, self.total_lines)

    @property
    def has_data(self) -> bool:
        return self.total_lines > 0


@dataclass
class CoverageReport:
    """Coverage parsed from one report file."""

    format: CoverageFormat
    report_path: Optional[Path] = None
    files: Dict[str, FileCoverage] = field(default_factory=dict)

    def add(self, coverage: FileCoverage) -> None:
        """Record a file; a later entry for the same path replaces the earlier one."""
        if coverage.has_data:
            self.files[coverage.file_path] = coverage

    def percentages(self) -> Dict[str, int]:
        return {path: fc.percent for path, fc in self.files.items()}

    @property
    def file_count(self) -> int:
        return len(self.files)
