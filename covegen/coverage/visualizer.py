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

"""Coverage badges and text reports."""

import os
from typing import Dict, Optional

GOOD_COVERAGE = 80
FAIR_COVERAGE = 50


def coverage_symbol(percent: int) -> str:
    """Status glyph: filled, half or empty circle."""
    if percent >= GOOD_COVERAGE:
        return "●"
    if percent >= FAIR_COVERAGE:
        return "◐"
    return "○"


def coverage_verdict(percent: int) -> str:
    if percent >= GOOD_COVERAGE:
        return "Good coverage"
    if percent >= FAIR_COVERAGE:
        return "Coverage needs improvement"
    return "Insufficient coverage"


def coverage_description(percent: int) -> str:
    """Short badge shown next to a file, e.g. ``"●  85%"``."""
    return f"{coverage_symbol(percent)} {percent:>3}%"


def coverage_tooltip(percent: int) -> str:
    """Markdown tooltip for a file with coverage data."""
    return f"**Coverage: {percent}%**\n\n{coverage_symbol(percent)} {coverage_verdict(percent)}"


class CoverageVisualizer:
    """Generates text views of the coverage map."""

    def __init__(self, threshold: int = 95, use_colors: bool = True):
        """Initialize the visualizer.

        Args:
            threshold: Coverage at or above which test generation is skipped
            use_colors: Whether to use ANSI colors in text output
        """
        self.threshold = threshold
        self.use_colors = use_colors

    def generate_text_report(
        self,
        coverage: Dict[str, int],
        workspace_root: Optional[str] = None,
        max_files: int = 50,
    ) -> str:
        """Generate a text table of per-file coverage, lowest first.

        Args:
            coverage: Map of absolute path to percentage
            workspace_root: If given, paths are shown relative to it
            max_files: Maximum files to list

        Returns:
            Text report string
        """
        lines = []

        lines.append("=" * 70)
        lines.append("COVERAGE REPORT")
        lines.append("=" * 70)

        if not coverage:
            lines.append("No coverage data found")
            return "\n".join(lines)

        average = sum(coverage.values()) / len(coverage)
        below = sum(1 for value in coverage.values() if value < self.threshold)
        lines.append(f"Files:       {len(coverage)}")
        lines.append(f"Average:     {average:.1f}%")
        lines.append(f"Below {self.threshold}%:  {below}")
        lines.append("")

        lines.append(f"{'File':<56} {'Cover':>8}")
        lines.append("-" * 70)

        for path, percent in sorted(coverage.items(), key=lambda item: (item[1], item[0]))[:max_files]:
            filename = os.path.relpath(path, workspace_root) if workspace_root else path
            if len(filename) > 54:
                filename = "..." + filename[-51:]

            cov_str = self._colorize(coverage_description(percent), self._color_for(percent))
            lines.append(f"{filename:<56} {cov_str:>8}")

        if len(coverage) > max_files:
            lines.append(f"... and {len(coverage) - max_files} more files")

        return "\n".join(lines)

    def _color_for(self, percent: int) -> str:
        if percent >= GOOD_COVERAGE:
            return "green"
        if percent >= FAIR_COVERAGE:
            return "yellow"
        return "red"

    def _colorize(self, text: str, color: str) -> str:
        """Apply ANSI color to text (or return it unchanged if colors are disabled)."""
        if not self.use_colors:
            return text

        colors = {
            "red": "\033[91m",
            "green": "\033[92m",
            "yellow": "\033[93m",
            "blue": "\033[94m",
            "reset": "\033[0m",
        }

        return f"{colors.get(color, '')}{text}{colors['reset']}"
