"""
Rendering of duplicate reports.

Reports written to a file use a fixed-width text table so they diff well
between runs; reports sent to the terminal use rich tables.
"""

import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

from rich import box
from rich.console import Console
from rich.table import Table

from .core.errors import ReportWriteError
from .core.types import Function
from .matching.compare import PairComparison

SEPARATOR_WIDTH = 79
PAIR_COLUMN_WIDTH = 40


def relative_path(path: Union[str, Path], base_dir: Optional[Union[str, Path]]) -> str:
    """Show path relative to base_dir when it lies underneath it."""
    if base_dir is None:
        return str(path)
    abs_path = os.path.abspath(str(path))
    abs_base = os.path.abspath(str(base_dir))
    try:
        if os.path.commonpath([abs_path, abs_base]) == abs_base:
            return os.path.relpath(abs_path, abs_base)
    except ValueError:
        # Different drives on Windows
        pass
    return str(path)


def sort_clusters(clusters: Sequence[List[Function]]) -> List[List[Function]]:
    """Largest clusters first, equal sizes ordered by first member's file."""
    ordered = sorted(clusters, key=lambda cluster: cluster[0].file)
    ordered.sort(key=lambda cluster: len(cluster), reverse=True)
    return ordered


def sort_members(cluster: Sequence[Function]) -> List[Function]:
    """Members ordered by file, then by ascending similarity."""
    return sorted(cluster, key=lambda function: (function.file, function.similarity))


def write_text(text: str, output_file: Union[str, Path]) -> None:
    """Write a rendered report.

    Raises:
        ReportWriteError: If the file cannot be written
    """
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ReportWriteError(f"Unable to write {output_file}: {e}", path=str(output_file)) from e


def _titled_table(title: str, **kwargs) -> Table:
    # Titles wrap to the table width, so keep the table at least as wide
    return Table(title=title, min_width=len(title) + 4, header_style="bold magenta", box=box.SIMPLE, **kwargs)


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


class ClusterReport:
    """Report of duplicate clusters found by the bucket map."""

    def __init__(self, clusters: Sequence[List[Function]], base_dir: Optional[Union[str, Path]] = None):
        self.clusters = sort_clusters([c for c in clusters if len(c) > 1])
        self.base_dir = base_dir

    def __len__(self) -> int:
        return len(self.clusters)

    def rows(self) -> List[List[Function]]:
        return [sort_members(cluster) for cluster in self.clusters]

    def render_text(self) -> str:
        lines = [f"| {'%':<4} | {'Decomp?':<8} | {'Name':<35} | Asm Path"]
        for members in self.rows():
            lines.append("-" * SEPARATOR_WIDTH)
            for function in members:
                lines.append(
                    f"| {function.similarity:<4.2f} | {_yes_no(function.decompiled):<8} "
                    f"| {function.name:<35} | {relative_path(function.file, self.base_dir)}"
                )
        return "\n".join(lines) + "\n"

    def to_table(self) -> Table:
        table = _titled_table(f"Duplicate clusters ({len(self.clusters)})", show_header=True)
        table.add_column("%", justify="right", style="green")
        table.add_column("Decomp?", style="cyan")
        table.add_column("Name", style="yellow", no_wrap=True)
        table.add_column("Asm Path")

        for members in self.rows():
            for function in members:
                table.add_row(
                    f"{function.similarity:.2f}",
                    _yes_no(function.decompiled),
                    function.name,
                    relative_path(function.file, self.base_dir),
                )
            table.add_section()
        return table

    def emit(self, output_file: Optional[Union[str, Path]] = None, stream: Optional[TextIO] = None) -> None:
        """Write the report to output_file, or print it when none is given."""
        if output_file is not None:
            write_text(self.render_text(), output_file)
            return
        Console(file=stream or sys.stdout).print(self.to_table())


class PairReport:
    """Report of an ordered two-directory comparison."""

    def __init__(self, comparison: PairComparison):
        self.comparison = comparison

    def render_text(self) -> str:
        width = PAIR_COLUMN_WIDTH
        rule = "-" * (SEPARATOR_WIDTH + 1)
        lines = [rule, "Duplicates and similarity", rule]
        for match in self.comparison.matches:
            lines.append(
                f"{match.left.name:<{width}} | {match.right.name:<{width}} | {match.similarity}"
            )

        lines.extend([rule, "Functions in file order", rule])
        lines.append(f"{self.comparison.left.name:<{width}} | {self.comparison.right.name:<{width}}")
        lines.append(rule)
        for function, match in self.comparison.ordered_view():
            dup_name = match.right.name if match is not None else ""
            lines.append(f"{function.name:<{width}} | {dup_name:<{width}}")
        return "\n".join(lines) + "\n"

    def to_tables(self) -> List[Table]:
        comparison = self.comparison

        matches = _titled_table("Duplicates and similarity")
        matches.add_column(comparison.left.name, style="yellow", no_wrap=True)
        matches.add_column(comparison.right.name, style="yellow", no_wrap=True)
        matches.add_column("%", justify="right", style="green")
        for match in comparison.matches:
            matches.add_row(match.left.name, match.right.name, f"{match.similarity:.2f}")

        ordered = _titled_table("Functions in file order")
        ordered.add_column(comparison.left.name, style="yellow", no_wrap=True)
        ordered.add_column(comparison.right.name, style="cyan", no_wrap=True)
        for function, match in comparison.ordered_view():
            ordered.add_row(function.name, match.right.name if match is not None else "")

        return [matches, ordered]

    def emit(self, output_file: Optional[Union[str, Path]] = None, stream: Optional[TextIO] = None) -> None:
        """Write the report to output_file, or print it when none is given."""
        if output_file is not None:
            write_text(self.render_text(), output_file)
            return
        console = Console(file=stream or sys.stdout)
        for table in self.to_tables():
            console.print(table)
