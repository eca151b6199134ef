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

"""Exceptions raised by the explorer core.

None of these escape to the host: each one is caught by the component
that consumes the failing leaf and turned into an empty result.
"""

from pathlib import Path
from typing import Optional, Union


class CovegenError(Exception):
    """Base class for explorer errors."""


class ParseError(CovegenError):
    """A source file could not be read or parsed."""

    def __init__(self, file_path: Union[str, Path], reason: str):
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(f"Cannot parse {self.file_path}: {reason}")


class ReportReadError(CovegenError):
    """A coverage report exists but could not be read or understood."""

    def __init__(self, report_path: Union[str, Path], reason: str, format_name: Optional[str] = None):
        self.report_path = Path(report_path)
        self.reason = reason
        self.format_name = format_name
        prefix = f"{format_name} report" if format_name else "Coverage report"
        super().__init__(f"{prefix} {self.report_path} is unreadable: {reason}")


class FilesystemError(CovegenError):
    """A directory could not be listed or a path could not be inspected."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot access {self.path}: {reason}")
