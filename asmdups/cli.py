"""Command-line interface for asmdups."""

import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from . import __version__
from .config import DupsConfig, load_config
from .core.errors import DupsError, is_io_error
from .core.loader import load_snapshot, log_snapshot_listing
from .core.markers import DecompiledIndex, scan_include_asm
from .matching.bucket_map import LevenshteinBucketMap
from .matching.compare import compare_ordered
from .reporting import ClusterReport, PairReport
from .utils.logging_setup import get_logger, log_operation, setup_logging

logger = get_logger(__name__)

HELP = """
Find duplicated functions in disassembled .s listings.

\b
Two-way compare with ordering:
  asmdups --dir asm/us/st/nz0/nonmatchings --dir asm/us/st/np3/nonmatchings --threshold .94

\b
Clustering report over the configured corpora:
  asmdups --threshold .94 --output-file output.txt
"""


def build_cluster_report(config: DupsConfig, threshold: float) -> ClusterReport:
    """Cluster every configured corpus and cross-reference INCLUDE_ASM markers."""
    snapshots = [
        load_snapshot(
            config.resolve(corpus.asm_dir),
            config.asm_extension,
            config.window_stride,
            config.window_size,
        )
        for corpus in config.corpora
    ]
    log_snapshot_listing(snapshots)

    bucket_map = LevenshteinBucketMap(threshold, length_prefilter=config.length_prefilter)
    for snapshot in snapshots:
        bucket_map.insert_all(snapshot.funcs)

    entries = []
    for corpus in config.corpora:
        entries.extend(
            scan_include_asm(
                config.resolve(corpus.src_dir),
                config.resolve(corpus.include_root),
                config.src_extension,
            )
        )
    decompiled = DecompiledIndex(entries)

    clusters = bucket_map.duplicate_clusters()
    for cluster in clusters:
        decompiled.mark(cluster)

    logger.info(
        f"{len(clusters)} duplicate clusters from {len(bucket_map)} buckets, "
        f"{len(decompiled)} INCLUDE_ASM markers"
    )
    return ClusterReport(clusters, base_dir=config.base_dir)


def build_pair_report(dirs: Sequence[str], config: DupsConfig, threshold: float) -> PairReport:
    """Compare two directories function by function, in address order."""
    snapshots = [
        load_snapshot(d, config.asm_extension, config.window_stride, config.window_size)
        for d in dirs
    ]
    log_snapshot_listing(snapshots)
    return PairReport(compare_ordered(snapshots, threshold))


def _validate_threshold(ctx, param, value):
    if value is not None and not 0.0 <= value <= 1.0:
        raise click.BadParameter(f"must be between 0 and 1, got {value}")
    return value


@click.command(name="asmdups", help=HELP)
@click.version_option(__version__, prog_name="asmdups")
@click.option(
    "-t", "--threshold",
    type=float,
    required=True,
    callback=_validate_threshold,
    help="Levenshtein similarity threshold (0.0-1.0)"
)
@click.option(
    "-d", "--dir", "dirs",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Directory to parse asm from (2 for an ordered compare)"
)
@click.option(
    "-o", "--output-file",
    type=click.Path(dir_okay=False),
    help="File to write output to (default: stdout)"
)
@click.option(
    "-s", "--src-base",
    type=click.Path(file_okay=False),
    help="Base directory the configured corpora live under"
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file"
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write JSON-lines logs to this file"
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
def main(
    threshold: float,
    dirs: Sequence[str],
    output_file: Optional[str],
    src_base: Optional[str],
    config_path: Optional[str],
    log_file: Optional[str],
    verbose: bool,
):
    setup_logging(level="DEBUG" if verbose else "WARNING", log_file=Path(log_file) if log_file else None)
    log_operation(logger, "cli_main", threshold=threshold, dirs=list(dirs))

    try:
        config = load_config(config_path)
        if src_base:
            config.base_dir = src_base

        if len(dirs) == 2:
            report = build_pair_report(dirs, config, threshold)
        else:
            if dirs:
                logger.warning(
                    f"Ordered compare needs exactly two directories, got {len(dirs)}; "
                    "running the clustering report over the configured corpora"
                )
            report = build_cluster_report(config, threshold)

        report.emit(output_file)
    except DupsError as e:
        logger.debug(f"Run aborted: {e.details}")
        prefix = "I/O error" if is_io_error(e) else "Error"
        click.echo(f"{prefix}: {e.message}", err=True)
        sys.exit(1)

    if output_file:
        logger.info(f"Wrote report to {output_file}")


if __name__ == "__main__":
    main()
