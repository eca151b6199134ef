# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Unit tests for path filtering."""

import errno
from pathlib import Path

import pytest

from covegen.codebase.ignore_patterns import (
    DEFAULT_SKIP_DIRS,
    IgnoreRules,
    PathFilter,
    get_effective_skip_dirs,
    is_source_file,
    is_test_or_config_file,
)


class TestTestAndConfigPatterns:
    """Name-based exclusion of tests, configs and manifests."""

    @pytest.mark.parametrize(
        "name",
        [
            "Button.test.tsx",
            "api.spec.ts",
            "login-test.js",
            "__tests__",
            "jest.config.js",
            "TSConfig.json",
            "setuptests.ts",
            "package.json",
            "yarn.lock",
            ".eslintrc.cjs",
        ],
    )
    def test_excluded_names(self, name):
        assert is_test_or_config_file(name)

    @pytest.mark.parametrize("name", ["app.js", "latest.ts", "contest.tsx", "src", "packages"])
    def test_regular_names_pass(self, name):
        assert not is_test_or_config_file(name)

    def test_whole_file_patterns_require_exact_match(self):
        assert is_test_or_config_file("package.json")
        assert not is_test_or_config_file("my-package.json")

    def test_source_extensions(self):
        assert is_source_file("a.js")
        assert is_source_file("A.TSX")
        assert not is_source_file("a.json")
        assert not is_source_file("a.py")


class TestSkipDirs:
    """Dependency directory handling."""

    def test_defaults_contain_node_modules(self):
        assert "node_modules" in DEFAULT_SKIP_DIRS

    def test_extra_dirs_are_added(self):
        effective = get_effective_skip_dirs(extra_skip_dirs=["dist"])
        assert effective == {"node_modules", "dist"}
        assert DEFAULT_SKIP_DIRS == {"node_modules"}


class TestIgnoreRules:
    """Gitignore-style rules relative to the workspace root."""

    def test_directory_pattern(self, tmp_path):
        rules = IgnoreRules(tmp_path, ["build/"])
        (tmp_path / "build").mkdir()

        assert rules.ignores(tmp_path / "build", is_dir=True)
        assert rules.ignores(tmp_path / "build" / "out.js")
        assert not rules.ignores(tmp_path / "src" / "build.js")

    def test_glob_and_negation(self, tmp_path):
        rules = IgnoreRules(tmp_path, ["*.generated.js", "!keep.generated.js"])

        assert rules.ignores(tmp_path / "api.generated.js")
        assert not rules.ignores(tmp_path / "keep.generated.js")

    def test_root_and_outside_paths_never_ignored(self, tmp_path):
        rules = IgnoreRules(tmp_path / "ws", ["*"])

        assert not rules.ignores(tmp_path / "ws", is_dir=True)
        assert not rules.ignores(tmp_path / "elsewhere.js")

    def test_from_workspace_without_file(self, tmp_path):
        rules = IgnoreRules.from_workspace(tmp_path)
        assert not rules.ignores(tmp_path / "anything.js")

    def test_from_workspace_reads_file(self, tmp_path, write_file):
        write_file(tmp_path, ".gitignore", "# generated\ncoverage/\n")
        rules = IgnoreRules.from_workspace(tmp_path)
        assert rules.ignores(tmp_path / "coverage" / "lcov.js")


class TestPathFilter:
    """Directory listing used by the tree."""

    def test_list_entries(self, js_workspace):
        path_filter = PathFilter(js_workspace)

        folders, files = path_filter.list_entries(js_workspace)

        assert [f.name for f in folders] == ["src"]
        assert [f.name for f in files] == ["index.js"]

    def test_nested_listing_excludes_tests(self, js_workspace):
        path_filter = PathFilter(js_workspace)

        folders, files = path_filter.list_entries(js_workspace / "src")

        assert [f.name for f in folders] == ["utils"]
        assert [f.name for f in files] == ["app.js"]

    def test_node_modules_never_listed(self, js_workspace):
        path_filter = PathFilter(js_workspace)

        assert path_filter.list_entries(js_workspace / "node_modules") == ([], [])
        assert path_filter.list_entries(js_workspace / "node_modules" / "lib") == ([], [])

    def test_ignored_directory_excluded(self, js_workspace):
        path_filter = PathFilter(js_workspace)
        assert not path_filter.is_eligible("build", js_workspace / "build")

    def test_extra_skip_dirs(self, js_workspace):
        path_filter = PathFilter(js_workspace, extra_skip_dirs=["src"])

        folders, _ = path_filter.list_entries(js_workspace)

        assert folders == []

    def test_count_eligible_files(self, js_workspace):
        path_filter = PathFilter(js_workspace)

        assert path_filter.count_eligible_files(js_workspace) == 3
        assert path_filter.count_eligible_files(js_workspace, limit=1) == 1
        assert path_filter.count_eligible_files(js_workspace / "docs") == 0

    def test_missing_directory_yields_nothing(self, tmp_path):
        path_filter = PathFilter(tmp_path)

        assert path_filter.list_entries(tmp_path / "missing") == ([], [])
        assert path_filter.count_eligible_files(tmp_path / "missing") == 0

    @pytest.mark.parametrize("ancestor", ["build", "node_modules"])
    def test_workspace_below_skipped_dir_name(self, tmp_path, write_file, ancestor):
        root = tmp_path / ancestor / "shop"
        write_file(root, "src/app.js", "export function run() {}\n")
        write_file(root, "build/bundle.js", "function bundled() {}\n")
        path_filter = PathFilter(root, extra_skip_dirs=["build"])

        folders, _ = path_filter.list_entries(root)

        assert [f.name for f in folders] == ["src"]
        assert [f.name for f in path_filter.list_entries(root / "src")[1]] == ["app.js"]
        assert path_filter.list_entries(root / "build") == ([], [])
        assert path_filter.count_eligible_files(root) == 1

    def test_outside_path_not_inside_skipped_dir(self, tmp_path):
        path_filter = PathFilter(tmp_path / "shop")

        assert not path_filter.is_inside_skipped_dir(tmp_path / "node_modules" / "lib")
        assert path_filter.is_inside_skipped_dir(tmp_path / "shop" / "node_modules" / "lib")

    def test_inaccessible_entry_is_skipped(self, tmp_path, write_file, monkeypatch):
        write_file(tmp_path, "locked/secret.js", "function hidden() {}\n")
        write_file(tmp_path, "ok.js", "function shown() {}\n")
        original_stat = Path.stat

        def denying_stat(self, *args, **kwargs):
            if self.name == "locked":
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return original_stat(self, *args, **kwargs)

        monkeypatch.setattr(Path, "stat", denying_stat)
        path_filter = PathFilter(tmp_path)

        folders, files = path_filter.list_entries(tmp_path)

        assert folders == []
        assert [f.name for f in files] == ["ok.js"]
        assert path_filter.count_eligible_files(tmp_path) == 1
        assert path_filter.is_ignored(tmp_path / "locked")

    def test_symlink_to_ancestor_counted_once(self, tmp_path, write_file):
        write_file(tmp_path, "index.js", "function main() {}\n")
        write_file(tmp_path, "src/app.js", "function run() {}\n")
        (tmp_path / "src" / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / "src" / "again").symlink_to(tmp_path, target_is_directory=True)
        path_filter = PathFilter(tmp_path)

        assert path_filter.count_eligible_files(tmp_path) == 2
        assert [f.name for f in path_filter.list_entries(tmp_path)[0]] == ["src"]
        assert [f.name for f in path_filter.list_entries(tmp_path / "src")[1]] == ["app.js"]
