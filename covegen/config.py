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

"""Explorer configuration.

Settings come from defaults, optionally overridden by a ``covegen.json``
file at the workspace root. The file uses the camelCase keys of the
editor extension (``coverageThreshold``, ``lcovReport``, ...); snake_case
field names are accepted as well. Keys the explorer does not use, such as
the test generator's ``toolPath`` or ``model``, are ignored.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "covegen.json"


class ExplorerConfig(BaseModel):
    """Configuration for the testable-code explorer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    coverage_threshold: int = Field(
        default=95,
        ge=0,
        le=100,
        alias="coverageThreshold",
        description="Coverage percentage at or above which test generation is skipped",
    )
    cobertura_report: str = Field(
        default="coverage/coverage.xml",
        alias="coberturaReport",
        description="Cobertura XML report, relative to the workspace root",
    )
    jacoco_report: str = Field(
        default="coverage/jacoco.xml",
        alias="jacocoReport",
        description="JaCoCo XML report, relative to the workspace root",
    )
    lcov_report: str = Field(
        default="coverage/lcov.info",
        alias="lcovReport",
        description="LCOV tracefile, relative to the workspace root",
    )
    skip_dirs: List[str] = Field(
        default_factory=lambda: ["node_modules"],
        alias="skipDirs",
        description="Directory names that are never listed or descended into",
    )
    ignore_file: str = Field(
        default=".gitignore",
        alias="ignoreFile",
        description="Ignore-rule file loaded from the workspace root",
    )
    root_label: str = Field(
        default="TESTABLE CODES",
        alias="rootLabel",
        description="Label of the top-level tree node",
    )

    def report_paths(self, workspace_root: Path) -> Dict[str, Path]:
        """Absolute report locations keyed by format name."""
        return {
            "cobertura": workspace_root / self.cobertura_report,
            "jacoco": workspace_root / self.jacoco_report,
            "lcov": workspace_root / self.lcov_report,
        }


class ProjectConfigManager:
    """Loads and caches per-workspace configuration."""

    def __init__(self) -> None:
        self._cache: Dict[Path, ExplorerConfig] = {}

    def get_config(self, workspace_root: Path) -> ExplorerConfig:
        """Get the configuration for a workspace.

        Args:
            workspace_root: Root directory of the workspace

        Returns:
            Project configuration merged over defaults, or the defaults
            when no usable ``covegen.json`` exists
        """
        key = Path(workspace_root).resolve()
        if key in self._cache:
            return self._cache[key]

        config = self._read_project_config(key) or ExplorerConfig()
        self._cache[key] = config
        return config

    def has_project_config(self, workspace_root: Path) -> bool:
        return (Path(workspace_root) / CONFIG_FILE_NAME).is_file()

    def clear_cache(self) -> None:
        self._cache.clear()

    def _read_project_config(self, workspace_root: Path) -> Optional[ExplorerConfig]:
        config_path = workspace_root / CONFIG_FILE_NAME
        if not config_path.is_file():
            return None

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            return ExplorerConfig.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring invalid project config {config_path}: {e}")
            return None


# Global manager singleton
_config_manager: Optional[ProjectConfigManager] = None


def get_config_manager() -> ProjectConfigManager:
    """Get the global project configuration manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ProjectConfigManager()
    return _config_manager


def reset_config_manager() -> None:
    """Reset the global project configuration manager."""
    global _config_manager
    _config_manager = None
