# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Unit tests for callable extraction and labelling."""

import pytest

from covegen.codebase.symbol_extractor import SymbolExtractor
from covegen.codebase.symbols import ANONYMOUS_CLASS, GLOBAL_SCOPE, SyntacticForm
from covegen.codebase.tree_sitter_manager import parse_source
from covegen.explorer.nodes import CallableIcon, callable_icon

SCENARIO_SOURCE = """\
function foo() {}
class C { bar() {} }
const f = () => {};
obj.onClick = () => {};
"""


@pytest.fixture
def extractor():
    return SymbolExtractor()


def parse(code: str, language: str = "javascript"):
    return parse_source(code.encode("utf-8"), language)


def labels(symbols):
    return [s.label for s in symbols]


def groups_by_name(extractor, code, language="javascript"):
    return {g.name: labels(g.symbols) for g in extractor.extract_class_groups(parse(code, language))}


class TestScenario:
    """Declarations, methods, arrows and assignments in one file."""

    def test_groups(self, extractor):
        groups = extractor.extract_class_groups(parse(SCENARIO_SOURCE))

        assert [g.name for g in groups] == ["C", GLOBAL_SCOPE]
        assert labels(groups[0].symbols) == ["bar"]
        assert labels(groups[1].symbols) == ["foo", "f", "obj.onClick"]

    def test_extract_methods(self, extractor):
        tree = parse(SCENARIO_SOURCE)

        assert labels(extractor.extract_methods(tree, "C")) == ["bar"]
        assert labels(extractor.extract_methods(tree, GLOBAL_SCOPE)) == ["foo", "f", "obj.onClick"]
        assert extractor.extract_methods(tree, "Missing") == []

    def test_syntactic_forms(self, extractor):
        symbols = {s.label: s for s in extractor.extract_symbols(parse(SCENARIO_SOURCE))}

        assert symbols["foo"].syntactic_form == SyntacticForm.DECLARATION
        assert symbols["bar"].syntactic_form == SyntacticForm.METHOD
        assert symbols["f"].syntactic_form == SyntacticForm.ARROW
        assert symbols["f"].is_arrow
        assert not symbols["foo"].is_arrow


class TestDeduplication:
    """One symbol per distinct start position."""

    def test_symbol_count_matches_distinct_positions(self, extractor):
        code = """\
class Store {
  load() { return items.map((item) => item.id); }
  save = async () => {};
}
function outer() { const inner = function () {}; }
app.use((req, res, next) => next());
"""
        symbols = extractor.extract_symbols(parse(code))
        starts = [s.source_range.start for s in symbols]

        assert len(symbols) == 6
        assert len(set(starts)) == len(starts)
        assert len({s.source_range for s in symbols}) == len(symbols)

    def test_groups_partition_symbols(self, extractor):
        tree = parse(SCENARIO_SOURCE + "class D { a() {} b() {} }\n")

        groups = extractor.extract_class_groups(tree)

        assert sum(len(g) for g in groups) == len(extractor.extract_symbols(tree))

    def test_var_wrapper_and_arrow_both_recorded(self, extractor):
        symbols = extractor.extract_symbols(parse("var handler = () => {};\n"))

        assert labels(symbols) == ["handler", "handler"]
        assert [s.node_type for s in symbols] == ["variable_declaration", "arrow_function"]
        assert all(s.is_arrow for s in symbols)

    def test_var_without_arrow_is_not_callable(self, extractor):
        assert extractor.extract_symbols(parse("var count = 1;\n")) == []

    def test_var_wrapper_named_after_declarator_holding_arrow(self, extractor):
        symbols = extractor.extract_symbols(parse("var a = 1, b = () => a;\n"))

        assert symbols[0].node_type == "variable_declaration"
        assert symbols[0].label == "b"


class TestGrouping:
    """Assignment of callables to class groups."""

    def test_class_methods_never_global(self, extractor):
        groups = groups_by_name(extractor, "class A { run() {} }\nfunction run2() {}\n")

        assert groups == {"A": ["run"], GLOBAL_SCOPE: ["run2"]}

    def test_arrows_inside_methods_belong_to_class(self, extractor):
        groups = groups_by_name(extractor, "class A { run() { list.forEach((x) => x); } }\n")

        assert groups == {"A": ["run", "list.forEach callback[0]"]}

    def test_inner_class_members(self, extractor):
        code = """\
class Outer {
  build() {
    return class Inner { run() {} };
  }
}
"""
        groups = groups_by_name(extractor, code)

        assert groups == {"Outer": ["build"], "Inner": ["run"]}

    def test_anonymous_class(self, extractor):
        groups = groups_by_name(extractor, "const X = class { go() {} };\n")

        assert groups == {ANONYMOUS_CLASS: ["go"]}

    def test_same_named_classes_share_group(self, extractor):
        groups = extractor.extract_class_groups(parse("class A { a() {} }\nclass A { b() {} }\n"))

        assert [g.name for g in groups] == ["A"]
        assert labels(groups[0].symbols) == ["a", "b"]

    def test_empty_class_dropped(self, extractor):
        groups = groups_by_name(extractor, "class Empty {}\nfunction f() {}\n")

        assert groups == {GLOBAL_SCOPE: ["f"]}

    def test_empty_file(self, extractor):
        assert extractor.extract_class_groups(parse("")) == []


class TestLabels:
    """Label derivation from the parent context."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("function* gen() {}", "gen"),
            ("const g = function () {};", "g"),
            ("const g = function inner() {};", "inner"),
            ("handler = () => {};", "handler"),
            ("module.exports.run = () => {};", "module.exports.run"),
            ("const o = { handle: () => {} };", "handle"),
            ('const o = { "home": () => {} };', "home"),
            ("const o = { run() {} };", "run"),
            ("setTimeout(() => {}, 100);", "setTimeout callback[0]"),
            ('app.get("/", (req, res) => {});', "app.get callback[1]"),
            ("new Promise((resolve) => resolve());", "Promise callback[0]"),
            ("fetchData()\n  .then(() => {});", "fetchData().then callback[0]"),
            ("(() => {})();", "λ (() => {})();"),
        ],
    )
    def test_first_label(self, extractor, code, expected):
        symbols = extractor.extract_symbols(parse(code))
        assert symbols[0].label == expected

    def test_snippet_truncated(self, extractor):
        code = "export default () => { return computeSomethingVeryLong(); };"

        symbols = extractor.extract_symbols(parse(code))

        assert labels(symbols) == ["λ export default () => { return ..."]

    def test_callback_index_ignores_comments(self, extractor):
        symbols = extractor.extract_symbols(parse("run(/* first */ a, () => {});"))
        assert labels(symbols) == ["run callback[1]"]

    def test_class_field_arrow_javascript(self, extractor):
        groups = groups_by_name(extractor, "class A { onSave = () => {}; }")
        assert groups == {"A": ["onSave"]}

    def test_private_method(self, extractor):
        symbols = extractor.extract_symbols(parse("class A { #secret() {} }"))

        assert labels(symbols) == ["#secret"]
        assert callable_icon(symbols[0]) == CallableIcon.PRIVATE


class TestTypeScript:
    """TypeScript and TSX grammars."""

    def test_class_fields_and_constructor(self, extractor):
        code = """\
class Svc {
  private handle = (x: number) => x;
  constructor() {}
}
"""
        symbols = extractor.extract_symbols(parse(code, "typescript"))

        assert labels(symbols) == ["handle", "constructor"]
        assert callable_icon(symbols[0]) == CallableIcon.ARROW
        assert callable_icon(symbols[1]) == CallableIcon.CONSTRUCTOR

    def test_abstract_class(self, extractor):
        code = "abstract class Base {\n  abstract run(): void;\n  go() {}\n}\n"

        groups = groups_by_name(extractor, code, "typescript")

        assert groups == {"Base": ["go"]}

    def test_tsx_component(self, extractor):
        code = "const App = () => <div onClick={() => {}} />;\n"

        symbols = extractor.extract_symbols(parse(code, "tsx"))

        assert symbols[0].label == "App"
        assert symbols[1].label.startswith("λ ")


class TestFileHelpers:
    """Parsing from disk."""

    def test_class_groups_for_file(self, extractor, tmp_path):
        path = tmp_path / "app.js"
        path.write_text(SCENARIO_SOURCE, encoding="utf-8")

        groups = extractor.class_groups_for_file(path)

        assert [g.name for g in groups] == ["C", GLOBAL_SCOPE]
        assert labels(extractor.methods_for_file(path, "C")) == ["bar"]

    def test_unreadable_file_yields_nothing(self, extractor, tmp_path):
        assert extractor.class_groups_for_file(tmp_path / "missing.js") == []
        assert extractor.methods_for_file(tmp_path / "notes.txt", GLOBAL_SCOPE) == []
