"""Command line entry point: download, extract and analyse packages."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

from keyword_impact.analyzer import analyze_directory
from keyword_impact.downloader import DownloadError, download_packages
from keyword_impact.extractor import extract_packages
from keyword_impact.results import AnalysisReport

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _index(value: str) -> int:
    try:
        number = int(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid index: {value!r}") from error
    if number < 0:
        raise argparse.ArgumentTypeError(f"index must not be negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyword-impact-analyzer",
        description="Analyze keyword impact across PHP packages for RFC authors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-k",
        "--keyword",
        action="append",
        required=True,
        help="Keywords to analyze (can be specified multiple times)",
    )
    parser.add_argument(
        "--min", type=_index, default=0, help="Minimum package index (0-based, inclusive)"
    )
    parser.add_argument(
        "--max", type=_index, default=500, help="Maximum package index (0-based, exclusive)"
    )
    parser.add_argument(
        "-d", "--directory", type=Path, default=Path("downloads"), help="Download directory"
    )
    parser.add_argument(
        "--skip-download",
        action="store_true",
        help="Skip download phase (analyze existing sources only)",
    )
    return parser


def run(args: argparse.Namespace) -> AnalysisReport:
    """Carry out every phase for parsed arguments and print the report."""
    if not args.keyword:
        raise ValueError("At least one keyword must be specified using --keyword")
    if args.min >= args.max:
        raise ValueError("Minimum index must be less than maximum index")

    directory = Path(args.directory)
    start = time.perf_counter()

    if args.skip_download:
        logger.info("Skipping download (--skip-download specified)")
    else:
        logger.info("Downloading packages %d to %d to %s", args.min, args.max, directory)
        download_start = time.perf_counter()
        successful, failed = asyncio.run(download_packages(directory, args.min, args.max))
        if failed:
            logger.warning("Download complete: %d successful, %d failed", successful, failed)
        else:
            logger.info("All %d packages downloaded successfully", successful)
        logger.info(
            "Downloaded %d packages in %.2fs", successful, time.perf_counter() - download_start
        )

    extract_start = time.perf_counter()
    extracted = extract_packages(directory)
    logger.info(
        "Extracted %d packages in %.2fs", extracted, time.perf_counter() - extract_start
    )

    sources_dir = directory / "sources"
    if not sources_dir.exists():
        raise FileNotFoundError(
            f"Sources directory does not exist: {sources_dir}. "
            "Run without --skip-download first."
        )

    analysis_start = time.perf_counter()
    report = analyze_directory(sources_dir, args.keyword)
    logger.info("Analysis completed in %.2fs", time.perf_counter() - analysis_start)
    logger.info("Total time: %.2fs", time.perf_counter() - start)

    report.display_table()
    return report


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    args = build_parser().parse_args(argv)
    try:
        run(args)
    except (DownloadError, ValueError, OSError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())