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

"""Path filtering for the testable-code tree.

Decides which directory entries are shown. Rules are applied in order and
the first match excludes the entry:

1. The entry is a dependency directory (``node_modules`` by default). Its
   subtree is never visited.
2. The entry's base name looks like a test, test-framework config, build
   tool config or package manifest/lockfile.
3. The entry is matched by the project's ``.gitignore`` rules.

Only JS/TS source files are listed, and a directory is listed only when
some descendant file survives the filter.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import pathspec

from covegen.errors import FilesystemError

logger = logging.getLogger(__name__)

DEPENDENCY_DIR = "node_modules"

DEFAULT_SKIP_DIRS: Set[str] = {DEPENDENCY_DIR}

SOURCE_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx")

TEST_AND_CONFIG_PATTERNS: Tuple[str, ...] = (
    # Test files
    ".test.",
    ".spec.",
    "-test.",
    "-spec.",
    "__tests__",
    "__test__",
    "setuptest.",
    "setuptests.js",
    "setuptests.ts",
    # Test framework configs
    "vitest.config.",
    "jest.config.",
    "jest.setup.",
    "jest.teardown.",
    "karma.conf.",
    "cypress.config.",
    "cypress.json",
    "mocha.opts",
    "ava.config.",
    "jasmine.json",
    "test.config.",
    "testSetup.",
    "test.setup.",
    # Tool configs
    ".eslintrc.",
    ".prettierrc.",
    ".babelrc.",
    "tsconfig.",
    "webpack.config.",
    "rollup.config.",
    "vite.config.",
    "postcss.config.",
    "tailwind.config.",
    ".stylelintrc",
    "nodemon.json",
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
)


def _is_exact_pattern(pattern: str) -> bool:
    # ".js" also catches ".json", so "package.json" is matched exactly too
    return any(ext in pattern for ext in SOURCE_EXTENSIONS)


def is_test_or_config_file(name: str) -> bool:
    """Check whether a file or directory name is a test or config artifact.

    Patterns that name a whole file (they contain a source extension) must
    equal the base name; all other patterns match as substrings. Both sides
    are compared case-insensitively.

    Example:
        >>> is_test_or_config_file("Button.test.tsx")
        True
        >>> is_test_or_config_file("setuptests.ts")
        True
        >>> is_test_or_config_file("latest.ts")
        False
    """
    basename = os.path.basename(name).lower()
    for pattern in TEST_AND_CONFIG_PATTERNS:
        lowered = pattern.lower()
        if _is_exact_pattern(lowered):
            if basename == lowered:
                return True
        elif lowered in basename:
            return True
    return False


def is_source_file(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in SOURCE_EXTENSIONS


def get_effective_skip_dirs(
    base_skip_dirs: Optional[Set[str]] = None,
    extra_skip_dirs: Optional[Iterable[str]] = None,
) -> Set[str]:
    """Get the effective set of directories to skip.

    Args:
        base_skip_dirs: Base set of directories to skip. Defaults to DEFAULT_SKIP_DIRS.
        extra_skip_dirs: Additional directories to skip.

    Returns:
        Combined set of directory names to skip
    """
    effective = set(base_skip_dirs) if base_skip_dirs is not None else DEFAULT_SKIP_DIRS.copy()
    if extra_skip_dirs:
        effective |= set(extra_skip_dirs)
    return effective


class IgnoreRules:
    """Project ignore rules (``.gitignore`` syntax), loaded once."""

    def __init__(self, workspace_root: Path, lines: Iterable[str] = ()):
        self.workspace_root = Path(workspace_root).resolve()
        self._spec = pathspec.GitIgnoreSpec.from_lines(list(lines))

    @classmethod
    def from_workspace(cls, workspace_root: Path, ignore_file: str = ".gitignore") -> "IgnoreRules":
        """Load rules from the workspace's ignore file, if it exists."""
        root = Path(workspace_root)
        ignore_path = root / ignore_file
        lines: List[str] = []
        if ignore_path.is_file():
            try:
                lines = ignore_path.read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Error reading {ignore_path}: {e}")
        return cls(root, lines)

    def ignores(self, path: Path, is_dir: bool = False) -> bool:
        """Check whether a path is excluded by the rules.

        Paths outside the workspace, and the workspace itself, are never
        ignored.
        """
        try:
            relative = Path(path).resolve().relative_to(self.workspace_root)
        except ValueError:
            return False

        rel = relative.as_posix()
        if rel in ("", "."):
            return False
        if is_dir:
            rel += "/"
        return self._spec.match_file(rel)


class PathFilter:
    """Decides which filesystem entries appear in the tree."""

    def __init__(
        self,
        workspace_root: Path,
        ignore_rules: Optional[IgnoreRules] = None,
        extra_skip_dirs: Optional[Iterable[str]] = None,
    ):
        """Initialize the filter.

        Args:
            workspace_root: Root directory of the workspace
            ignore_rules: Project ignore rules; loaded from ``.gitignore`` if omitted
            extra_skip_dirs: Directory names skipped in addition to ``node_modules``
        """
        self.workspace_root = Path(workspace_root).resolve()
        self.ignore_rules = ignore_rules or IgnoreRules.from_workspace(self.workspace_root)
        self.skip_dirs = get_effective_skip_dirs(extra_skip_dirs=extra_skip_dirs)

    def is_ignored(self, full_path: Path, is_dir: Optional[bool] = None) -> bool:
        path = Path(full_path)
        if is_dir is None:
            kind = self._entry_kind(path)
            if kind is None:
                return True
            is_dir = kind == "dir"
        return self.ignore_rules.ignores(path, is_dir=is_dir)

    def is_eligible(self, entry_name: str, full_path: Path, is_dir: Optional[bool] = None) -> bool:
        """Apply the exclusion rules to one directory entry."""
        if entry_name in self.skip_dirs:
            return False
        if is_test_or_config_file(entry_name):
            return False
        if self.is_ignored(full_path, is_dir=is_dir):
            return False
        return True

    def is_inside_skipped_dir(self, path: Path) -> bool:
        """Check if a component of the path below the workspace root is a skipped directory.

        Ancestors of the workspace root do not count, and paths outside the
        workspace are never inside a skipped directory.
        """
        try:
            relative = Path(path).resolve().relative_to(self.workspace_root)
        except ValueError:
            return False
        return any(part in self.skip_dirs for part in relative.parts)

    def list_entries(self, dir_path: Path) -> Tuple[List[Path], List[Path]]:
        """List the folders and source files shown under a directory.

        Folders are included only when they contain at least one eligible
        source file at any depth.

        Returns:
            Tuple of (folders, files), each sorted by name. Both lists are
            empty when the directory cannot be read.
        """
        folders: List[Path] = []
        files: List[Path] = []

        if self.is_inside_skipped_dir(dir_path):
            return folders, files

        try:
            entries = self._scan(dir_path)
        except FilesystemError as e:
            logger.warning(str(e))
            return folders, files

        for entry in entries:
            kind = self._entry_kind(entry)
            if kind is None:
                continue
            if not self.is_eligible(entry.name, entry, is_dir=kind == "dir"):
                continue
            if kind == "dir":
                if self.count_eligible_files(entry, limit=1) > 0:
                    folders.append(entry)
            elif kind == "file" and is_source_file(entry.name):
                files.append(entry)

        return folders, files

    def count_eligible_files(
        self,
        dir_path: Path,
        limit: Optional[int] = None,
        _visited: Optional[Set[Path]] = None,
    ) -> int:
        """Count eligible source files below a directory.

        Each real directory is counted once, so symlinks pointing back to an
        ancestor do not recurse.

        Args:
            dir_path: Directory to search
            limit: Stop counting once this many files were found

        Returns:
            Number of eligible files found (at most ``limit``)
        """
        if _visited is None:
            _visited = set()
        real_path = Path(dir_path).resolve()
        if real_path in _visited:
            logger.debug(f"Already visited {real_path}, not counting {dir_path} again")
            return 0
        _visited.add(real_path)

        count = 0
        try:
            entries = self._scan(dir_path)
        except FilesystemError as e:
            logger.warning(str(e))
            return 0

        for entry in entries:
            if limit is not None and count >= limit:
                break
            kind = self._entry_kind(entry)
            if kind is None:
                continue
            if not self.is_eligible(entry.name, entry, is_dir=kind == "dir"):
                continue
            if kind == "dir":
                remaining = None if limit is None else limit - count
                count += self.count_eligible_files(entry, limit=remaining, _visited=_visited)
            elif kind == "file" and is_source_file(entry.name):
                count += 1

        return count

    def _entry_kind(self, entry: Path) -> Optional[str]:
        """Stat an entry once: "dir", "file", or None when it cannot be accessed."""
        try:
            mode = entry.stat().st_mode
        except OSError as e:
            logger.warning(f"Skipping {entry}: {e.strerror or e}")
            return None
        if stat.S_ISDIR(mode):
            return "dir"
        if stat.S_ISREG(mode):
            return "file"
        return None

    def _scan(self, dir_path: Path) -> List[Path]:
        try:
            return sorted(Path(dir_path).iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise FilesystemError(dir_path, e.strerror or str(e)) from e
