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

"""Coverage report parsers.

Defines the abstract parser interface and implementations for the
Cobertura, JaCoCo and LCOV formats. Each parser reduces its report to
per-file line counts with paths resolved against the workspace root.

Parsers raise ``ReportReadError`` for unreadable or malformed reports and
leave it to the caller to decide how to recover.
"""

import fnmatch
import logging
import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from covegen.coverage.protocol import (
    CoverageFormat,
    CoverageReport,
    FileCoverage,
    resolve_report_path,
)
from covegen.errors import ReportReadError

logger = logging.getLogger(__name__)


def _count(value: Optional[str]) -> int:
    """Parse a numeric report attribute; a missing attribute counts as zero."""
    if value is None or value.strip() == "":
        return 0
    return int(value.strip())


class BaseCoverageParser(ABC):
    """Abstract base class for coverage parsers."""

    @property
    @abstractmethod
    def format(self) -> CoverageFormat:
        """Report format handled by this parser."""
        ...

    @property
    @abstractmethod
    def file_patterns(self) -> List[str]:
        """Glob patterns for files this parser handles."""
        ...

    @property
    def name(self) -> str:
        return self.format.value

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle a file, by file name."""
        name = Path(file_path).name
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.file_patterns)

    def parse(self, file_path: Path, workspace_root: Union[str, Path]) -> CoverageReport:
        """Parse a coverage file into a report.

        Args:
            file_path: Path to coverage file
            workspace_root: Directory that report paths are relative to

        Returns:
            CoverageReport keyed by absolute source path

        Raises:
            ReportReadError: If the report cannot be read or is malformed
        """
        report = CoverageReport(format=self.format, report_path=Path(file_path))
        try:
            self._parse_into(report, Path(file_path), workspace_root)
        except ReportReadError:
            raise
        except ET.ParseError as e:
            raise ReportReadError(file_path, f"invalid XML: {e}", self.name) from e
        except UnicodeDecodeError as e:
            raise ReportReadError(file_path, f"not valid UTF-8: {e}", self.name) from e
        except OSError as e:
            raise ReportReadError(file_path, e.strerror or str(e), self.name) from e
        except ValueError as e:
            raise ReportReadError(file_path, f"bad numeric value: {e}", self.name) from e

        logger.debug(f"Parsed {report.file_count} files from {self.name} report {file_path}")
        return report

    @abstractmethod
    def _parse_into(self, report: CoverageReport, file_path: Path, workspace_root: Union[str, Path]) -> None:
        ...


class CoberturaParser(BaseCoverageParser):
    """Parser for Cobertura XML coverage format.

    Used by Istanbul/nyc, vitest, jest, coverage.py, etc. A line counts as
    covered when its ``hits`` attribute is positive.
    """

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.COBERTURA

    @property
    def file_patterns(self) -> List[str]:
        return ["coverage.xml", "cobertura.xml", "cobertura-coverage.xml"]

    def _parse_into(self, report: CoverageReport, file_path: Path, workspace_root: Union[str, Path]) -> None:
        root = ET.parse(file_path).getroot()
        if root.tag != "coverage":
            logger.debug(f"{file_path} has root <{root.tag}>, not a Cobertura report")
            return

        for package in root.findall("packages/package"):
            for class_elem in package.findall("classes/class"):
                coverage = self._parse_class(class_elem, workspace_root)
                if coverage:
                    report.add(coverage)

    def _parse_class(self, class_elem: ET.Element, workspace_root: Union[str, Path]) -> Optional[FileCoverage]:
        filename = class_elem.get("filename")
        if not filename:
            return None

        # method-level <line> elements repeat the class-level ones
        lines = class_elem.findall("lines/line")
        if not lines:
            return None

        covered = sum(1 for line in lines if _count(line.get("hits")) > 0)
        return FileCoverage(
            file_path=resolve_report_path(workspace_root, filename),
            total_lines=len(lines),
            covered_lines=covered,
        )


class JacocoParser(BaseCoverageParser):
    """Parser for JaCoCo XML coverage format.

    A line counts as covered when it has covered instructions (``ci``) or
    covered branches (``cb``).
    """

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.JACOCO

    @property
    def file_patterns(self) -> List[str]:
        return ["jacoco.xml", "jacocoTestReport.xml"]

    def _parse_into(self, report: CoverageReport, file_path: Path, workspace_root: Union[str, Path]) -> None:
        root = ET.parse(file_path).getroot()
        if root.tag != "report":
            logger.debug(f"{file_path} has root <{root.tag}>, not a JaCoCo report")
            return

        # packages may sit directly under <report> or inside <group> elements
        for package in root.iter("package"):
            package_name = package.get("name", "")
            for source_elem in package.findall("sourcefile"):
                coverage = self._parse_sourcefile(source_elem, package_name, workspace_root)
                if coverage:
                    report.add(coverage)

    def _parse_sourcefile(
        self, source_elem: ET.Element, package_name: str, workspace_root: Union[str, Path]
    ) -> Optional[FileCoverage]:
        filename = source_elem.get("name")
        if not filename:
            return None

        lines = source_elem.findall("line")
        if not lines:
            return None

        covered = sum(
            1 for line in lines if _count(line.get("ci")) > 0 or _count(line.get("cb")) > 0
        )
        if package_name:
            relative = os.path.join(package_name.replace(".", "/"), filename)
        else:
            relative = filename

        return FileCoverage(
            file_path=resolve_report_path(workspace_root, relative),
            total_lines=len(lines),
            covered_lines=covered,
        )


@dataclass
class _LcovRecord:
    source_file: str
    lines_found: Optional[int] = None
    lines_hit: int = 0


class LcovParser(BaseCoverageParser):
    """Parser for LCOV tracefiles.

    Used by Istanbul (JavaScript), c8, gcov and many others. Only the
    per-record ``LF`` (lines found) and ``LH`` (lines hit) summaries are
    read. A record left open at end of file is still counted.
    """

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.LCOV

    @property
    def file_patterns(self) -> List[str]:
        return ["lcov.info", "*.lcov", "coverage.lcov"]

    def _parse_into(self, report: CoverageReport, file_path: Path, workspace_root: Union[str, Path]) -> None:
        content = file_path.read_text(encoding="utf-8")
        for record in self.parse_records(content):
            if record.lines_found is None:
                continue
            report.add(
                FileCoverage(
                    file_path=resolve_report_path(workspace_root, record.source_file),
                    total_lines=record.lines_found,
                    covered_lines=record.lines_hit,
                )
            )

    @staticmethod
    def parse_records(content: str) -> List[_LcovRecord]:
        """Split tracefile text into records.

        Raises:
            ValueError: If an LF or LH count is not an integer
        """
        records: List[_LcovRecord] = []
        current: Optional[_LcovRecord] = None

        for line_number, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if line == "end_of_record":
                current = None
                continue

            tag, sep, data = line.partition(":")
            if not sep:
                continue

            if tag == "SF":
                current = _LcovRecord(source_file=data.strip())
                records.append(current)
            elif current is None:
                continue
            elif tag == "LF":
                current.lines_found = _lcov_count(data, line_number)
            elif tag == "LH":
                current.lines_hit = _lcov_count(data, line_number)

        return records


def _lcov_count(data: str, line_number: int) -> int:
    try:
        return int(data.strip())
    except ValueError:
        raise ValueError(f"line {line_number}: {data.strip()!r} is not a count") from None


# Registry of available parsers, in merge order
COVERAGE_PARSERS: List[type] = [
    CoberturaParser,
    JacocoParser,
    LcovParser,
]


def get_parser_for_format(coverage_format: CoverageFormat) -> BaseCoverageParser:
    for parser_class in COVERAGE_PARSERS:
        parser = parser_class()
        if parser.format == coverage_format:
            return parser
    raise ValueError(f"No parser for format: {coverage_format}")


def get_parser_for_file(file_path: Path) -> Optional[BaseCoverageParser]:
    """Get an appropriate parser for a coverage file.

    Args:
        file_path: Path to coverage file

    Returns:
        Parser instance or None if no parser matches
    """
    for parser_class in COVERAGE_PARSERS:
        parser = parser_class()
        if parser.can_parse(file_path):
            return parser
    return None


def parse_coverage_file(file_path: Path, workspace_root: Union[str, Path]) -> Optional[CoverageReport]:
    """Parse a coverage file using an appropriate parser.

    Args:
        file_path: Path to coverage file
        workspace_root: Directory that report paths are relative to

    Returns:
        CoverageReport or None if no parser matches

    Raises:
        ReportReadError: If the report cannot be read or is malformed
    """
    parser = get_parser_for_file(file_path)
    if parser is None:
        logger.warning(f"No parser found for: {file_path}")
        return None

    return parser.parse(file_path, workspace_root)
