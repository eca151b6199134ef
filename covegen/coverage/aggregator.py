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

"""Process-wide coverage cache.

Holds the mapping from absolute source path to coverage percentage that
the tree reads synchronously while rendering. ``refresh`` reads the
Cobertura, JaCoCo and LCOV reports concurrently; each report is optional
and a broken one only loses its own contribution. The merged map is
published in one assignment once every read has finished.

When two reports describe the same file, the report merged later wins.
The merge order is fixed: Cobertura, then JaCoCo, then LCOV.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from covegen.config import ExplorerConfig
from covegen.coverage.parser import BaseCoverageParser, get_parser_for_format
from covegen.coverage.protocol import CoverageFormat, CoverageReport, normalize_path
from covegen.errors import ReportReadError

logger = logging.getLogger(__name__)

MERGE_ORDER: Tuple[CoverageFormat, ...] = (
    CoverageFormat.COBERTURA,
    CoverageFormat.JACOCO,
    CoverageFormat.LCOV,
)


class CoverageCache:
    """Coverage percentages keyed by absolute file path.

    A single long-lived instance is shared by the tree and by anything
    that needs to query coverage (such as the test generation gate).
    Entries change only when ``refresh`` completes.
    """

    def __init__(self, config: Optional[ExplorerConfig] = None):
        """Initialize an empty cache.

        Args:
            config: Explorer configuration providing report locations
        """
        self.config = config or ExplorerConfig()
        self._coverage: Dict[str, int] = {}
        self._last_refresh: Optional[datetime] = None

    @property
    def last_refresh(self) -> Optional[datetime]:
        return self._last_refresh

    async def refresh(self, workspace_root: Union[str, Path]) -> Dict[str, int]:
        """Re-read all coverage reports and replace the cached map.

        Args:
            workspace_root: Workspace whose reports are read

        Returns:
            The newly published coverage map
        """
        root = Path(normalize_path(workspace_root))
        report_paths = self.config.report_paths(root)

        reports = await asyncio.gather(
            *(
                asyncio.to_thread(
                    self._collect,
                    get_parser_for_format(coverage_format),
                    report_paths[coverage_format.value],
                    root,
                )
                for coverage_format in MERGE_ORDER
            )
        )

        self.publish(self.merge(reports))
        logger.info(f"Coverage refreshed: {len(self._coverage)} files from {root}")
        return dict(self._coverage)

    def publish(self, coverage: Dict[str, int]) -> None:
        """Replace the cached map with a new one."""
        self._coverage = dict(coverage)
        self._last_refresh = datetime.now()

    @staticmethod
    def merge(reports: List[Optional[CoverageReport]]) -> Dict[str, int]:
        """Merge reports in order; later reports overwrite earlier entries."""
        merged: Dict[str, int] = {}
        for report in reports:
            if report is not None:
                merged.update(report.percentages())
        return merged

    def get_coverage(self, file_path: Union[str, Path]) -> Optional[int]:
        """Coverage percentage for a file, or None when no report covers it."""
        return self._coverage.get(normalize_path(file_path))

    def meets_threshold(self, file_path: Union[str, Path], threshold: Optional[int] = None) -> bool:
        """Check whether a file's coverage is at or above the threshold.

        Files without coverage data never meet it.
        """
        coverage = self.get_coverage(file_path)
        if coverage is None:
            return False
        limit = self.config.coverage_threshold if threshold is None else threshold
        return coverage >= limit

    def snapshot(self) -> Dict[str, int]:
        return dict(self._coverage)

    def __len__(self) -> int:
        return len(self._coverage)

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, Path)):
            return False
        return normalize_path(file_path) in self._coverage

    @staticmethod
    def _collect(
        parser: BaseCoverageParser, report_path: Path, workspace_root: Path
    ) -> Optional[CoverageReport]:
        if not report_path.is_file():
            logger.debug(f"No {parser.name} report at {report_path}")
            return None

        try:
            return parser.parse(report_path, workspace_root)
        except ReportReadError as e:
            logger.warning(f"Skipping {parser.name} coverage: {e}")
            return None
