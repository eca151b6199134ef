# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for the covegen command line."""

import pytest
from click.testing import CliRunner

from covegen import __version__
from covegen.cli import main

LCOV_REPORT = "SF:src/app.js\nLF:20\nLH:15\nend_of_record\nSF:index.js\nLF:4\nLH:4\nend_of_record\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def covered_workspace(js_workspace, write_file):
    write_file(js_workspace, "coverage/lcov.info", LCOV_REPORT)
    return js_workspace


class TestCli:
    """Command line entry points."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tree(self, runner, covered_workspace):
        result = runner.invoke(main, ["tree", str(covered_workspace)])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("TESTABLE CODES\n")
        assert "app.js  ◐  75%" in result.output
        assert "bar  [method]" in result.output
        assert "node_modules" not in result.output

    def test_tree_without_coverage(self, runner, covered_workspace):
        result = runner.invoke(main, ["tree", str(covered_workspace), "--no-coverage", "--depth", "3"])

        assert result.exit_code == 0, result.output
        assert "%" not in result.output
        assert "bar" not in result.output

    def test_symbols(self, runner, js_workspace):
        result = runner.invoke(main, ["symbols", str(js_workspace / "src" / "app.js")])

        assert result.exit_code == 0, result.output
        assert "C (1)" in result.output
        assert "Global Scope (3)" in result.output
        assert "obj.onClick" in result.output

    def test_symbols_with_source(self, runner, js_workspace):
        result = runner.invoke(main, ["symbols", str(js_workspace / "src" / "app.js"), "--source"])

        assert result.exit_code == 0, result.output
        assert "C / bar" in result.output
        assert "Global Scope / foo" in result.output
        assert "function foo() {}" in result.output

    def test_symbols_empty_file(self, runner, tmp_path):
        path = tmp_path / "empty.js"
        path.write_text("", encoding="utf-8")

        result = runner.invoke(main, ["symbols", str(path)])

        assert result.exit_code == 0
        assert "No callables found." in result.output

    def test_coverage_report(self, runner, covered_workspace):
        result = runner.invoke(main, ["coverage", str(covered_workspace), "--no-color"])

        assert result.exit_code == 0, result.output
        assert "COVERAGE REPORT" in result.output
        assert "Files:       2" in result.output

    def test_coverage_for_files(self, runner, covered_workspace):
        result = runner.invoke(
            main, ["coverage", str(covered_workspace), "src/app.js", "index.js", "src/other.js"]
        )

        assert result.exit_code == 0, result.output
        assert "src/app.js: ◐  75% (generate tests)" in result.output
        assert "index.js: ● 100% (skip generation)" in result.output
        assert "src/other.js: no coverage data" in result.output

    def test_coverage_single_report(self, runner, js_workspace, write_file):
        report = write_file(js_workspace, "reports/lcov.info", "SF:index.js\nLF:2\nLH:1\nend_of_record\n")

        result = runner.invoke(main, ["coverage", str(js_workspace), "index.js", "--report", str(report)])

        assert result.exit_code == 0, result.output
        assert "index.js: ◐  50% (generate tests)" in result.output

    def test_coverage_unknown_report_format(self, runner, js_workspace, write_file):
        report = write_file(js_workspace, "reports/results.txt", "nothing")

        result = runner.invoke(main, ["coverage", str(js_workspace), "--report", str(report)])

        assert result.exit_code == 1

    def test_coverage_malformed_report(self, runner, js_workspace, write_file):
        report = write_file(js_workspace, "reports/coverage.xml", "<coverage><packages>")

        result = runner.invoke(main, ["coverage", str(js_workspace), "--report", str(report)])

        assert result.exit_code == 1
