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

"""Coverage aggregation.

Parses Cobertura, JaCoCo and LCOV reports and merges them into one
per-file percentage map.
"""

from covegen.coverage.aggregator import MERGE_ORDER, CoverageCache
from covegen.coverage.parser import (
    COVERAGE_PARSERS,
    BaseCoverageParser,
    CoberturaParser,
    JacocoParser,
    LcovParser,
    get_parser_for_file,
    get_parser_for_format,
    parse_coverage_file,
)
from covegen.coverage.protocol import (
    CoverageFormat,
    CoverageReport,
    FileCoverage,
    normalize_path,
    resolve_report_path,
    round_percent,
)
from covegen.coverage.visualizer import (
    CoverageVisualizer,
    coverage_description,
    coverage_symbol,
    coverage_tooltip,
    coverage_verdict,
)

__all__ = [
    # Protocol types
    "CoverageFormat",
    "CoverageReport",
    "FileCoverage",
    "normalize_path",
    "resolve_report_path",
    "round_percent",
    # Parsers
    "COVERAGE_PARSERS",
    "BaseCoverageParser",
    "CoberturaParser",
    "JacocoParser",
    "LcovParser",
    "get_parser_for_file",
    "get_parser_for_format",
    "parse_coverage_file",
    # Cache
    "MERGE_ORDER",
    "CoverageCache",
    # Visualizer
    "CoverageVisualizer",
    "coverage_description",
    "coverage_symbol",
    "coverage_tooltip",
    "coverage_verdict",
]
