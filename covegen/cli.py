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

"""Covegen CLI.

Usage:
    covegen tree [PATH]              Print the testable-code tree
    covegen symbols FILE [--source]  List class groups and callables in a file
    covegen coverage [PATH] [FILE]   Show merged coverage for a workspace
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from covegen import __version__
from covegen.codebase.symbol_extractor import SymbolExtractor
from covegen.codebase.symbols import CallableSymbol
from covegen.codebase.tree_sitter_manager import detect_language
from covegen.config import get_config_manager
from covegen.coverage.aggregator import CoverageCache
from covegen.coverage.parser import parse_coverage_file
from covegen.coverage.protocol import normalize_path
from covegen.coverage.visualizer import CoverageVisualizer, coverage_description
from covegen.errors import ReportReadError
from covegen.explorer.composer import HierarchyComposer
from covegen.explorer.nodes import callable_icon
from covegen.explorer.render import render_tree


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
def main(verbose: bool):
    """Covegen: browse testable JS/TS code with coverage."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--no-coverage", is_flag=True, help="Do not read coverage reports")
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Maximum depth to expand")
def tree(path: str, no_coverage: bool, depth: Optional[int]):
    """Print the testable-code tree of a workspace."""
    composer = HierarchyComposer(Path(path))
    if not no_coverage:
        asyncio.run(composer.refresh())

    click.echo(render_tree(composer, depth=depth, show_coverage=not no_coverage))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", "show_source", is_flag=True, help="Show the source of each callable")
def symbols(file: str, show_source: bool):
    """List the class groups and callables of one source file."""
    extractor = SymbolExtractor()
    groups = extractor.class_groups_for_file(file)
    if not groups:
        click.echo("No callables found.")
        return

    for group in groups:
        click.echo(f"{group.name} ({len(group)})")
        for symbol in group.symbols:
            click.echo(f"  {symbol.label:<40} {callable_icon(symbol).value:<12} {symbol.source_range}")

    if show_source:
        source_lines = Path(file).read_text(encoding="utf-8", errors="replace").splitlines()
        # pygments has no separate tsx lexer in older releases
        lexer = "typescript" if detect_language(file) in ("typescript", "tsx") else "javascript"
        console = Console()
        for group in groups:
            for symbol in group.symbols:
                _print_callable_source(console, symbol, source_lines, lexer)


def _print_callable_source(
    console: Console, symbol: CallableSymbol, source_lines: List[str], lexer: str
) -> None:
    """Print one callable's source lines in a highlighted panel."""
    rng = symbol.source_range
    code = "\n".join(source_lines[rng.start_line : rng.end_line + 1])
    syntax = Syntax(code, lexer, theme="monokai", line_numbers=True, start_line=rng.start_line + 1)
    console.print(Panel(syntax, title=f"{symbol.owning_group} / {symbol.label}", border_style="cyan"))


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.argument("files", nargs=-1, type=click.Path())
@click.option("--report", "report_file", type=click.Path(exists=True, dir_okay=False),
              help="Read a single report file instead of the workspace reports")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors")
def coverage(path: str, files: Tuple[str, ...], report_file: Optional[str], no_color: bool):
    """Show merged coverage, or the entries for specific files."""
    root = Path(path)
    config = get_config_manager().get_config(root)
    cache = CoverageCache(config)

    if report_file:
        try:
            report = parse_coverage_file(Path(report_file), root)
        except ReportReadError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        if report is None:
            click.echo(f"Error: unrecognized report format: {report_file}", err=True)
            sys.exit(1)
        cache.publish(CoverageCache.merge([report]))
    else:
        asyncio.run(cache.refresh(root))

    if not files:
        visualizer = CoverageVisualizer(threshold=config.coverage_threshold, use_colors=not no_color)
        click.echo(visualizer.generate_text_report(cache.snapshot(), workspace_root=normalize_path(root)))
        return

    for file in files:
        percent = cache.get_coverage(root / file)
        if percent is None:
            click.echo(f"{file}: no coverage data")
            continue
        verdict = "skip generation" if cache.meets_threshold(root / file) else "generate tests"
        click.echo(f"{file}: {coverage_description(percent)} ({verdict})")
