# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Shared fixtures for covegen tests."""

from pathlib import Path

import pytest

from covegen.config import reset_config_manager

SCENARIO_SOURCE = """\
function foo() {}
class C { bar() {} }
const f = () => {};
obj.onClick = () => {};
"""

HELPERS_SOURCE = """\
export class Formatter {
  constructor(prefix: string) {}
  format(value: string): string { return value; }
}
"""


def _write_file(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    """Helper that writes a file below a root, creating parent directories."""
    return _write_file


@pytest.fixture(autouse=True)
def _fresh_config_manager():
    reset_config_manager()
    yield
    reset_config_manager()


@pytest.fixture
def js_workspace(tmp_path: Path) -> Path:
    """A small JS/TS project with tests, configs and dependencies mixed in."""
    root = tmp_path / "shop"
    _write_file(root, "index.js", "module.exports.start = () => {};\n")
    _write_file(root, "src/app.js", SCENARIO_SOURCE)
    _write_file(root, "src/app.test.js", "test('x', () => {});\n")
    _write_file(root, "src/utils/helpers.ts", HELPERS_SOURCE)
    _write_file(root, "src/__tests__/setup.js", "function setup() {}\n")
    _write_file(root, "node_modules/lib/index.js", "function dep() {}\n")
    _write_file(root, "node_modules/lib/nested/deep.js", "function deeper() {}\n")
    _write_file(root, "build/bundle.js", "function bundled() {}\n")
    _write_file(root, "docs/readme.md", "# Docs\n")
    _write_file(root, "jest.config.js", "module.exports = {};\n")
    _write_file(root, "package.json", "{}\n")
    _write_file(root, ".gitignore", "build/\n")
    (root / "empty").mkdir()
    return root
