"""Command-line interface for municipio shards."""

import argparse
import logging
import sys

from municipio_shards.errors import ShardWriteError, SourceUnavailable
from municipio_shards.pipeline.orchestrator import DEFAULT_OUT_DIR, run
from municipio_shards.pipeline.source import DEFAULT_SOURCE_URL, DEFAULT_TIMEOUT
from municipio_shards.search import search_by_code, search_by_name, search_by_region

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="municipio-shards",
        description="Build and search per-region binary shards of the municipal registry.",
    )

    parser.add_argument(
        "--out-dir",
        default=DEFAULT_OUT_DIR,
        help=f"Directory holding the shard files (default: {DEFAULT_OUT_DIR})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Fetch the registry and rewrite the shards")
    source = build.add_mutually_exclusive_group()
    source.add_argument(
        "--url",
        default=DEFAULT_SOURCE_URL,
        help="Dataset URL (semicolon-delimited: TOM;IBGE;Nome TOM;Nome IBGE;UF)",
    )
    source.add_argument(
        "--input",
        dest="input_path",
        help="Read the dataset from a local file instead of downloading it",
    )
    build.add_argument(
        "--keep-source",
        metavar="PATH",
        help="Keep the downloaded dataset at PATH, writing changed lines next to it",
    )
    build.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of fingerprinting workers (default: one per CPU)",
    )
    build.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Download timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )

    search = subparsers.add_parser("search", help="Query existing shards")
    query = search.add_mutually_exclusive_group(required=True)
    query.add_argument("--region", help="Region (UF) code, e.g. SP")
    query.add_argument("--name", help="Part of the municipality name, e.g. campinas")
    query.add_argument("--code", help="IBGE code, e.g. 3509502")

    return parser


def run_build(args: argparse.Namespace) -> int:
    try:
        stats = run(
            out_dir=args.out_dir,
            source_url=args.url,
            input_path=args.input_path,
            local_copy=args.keep_source,
            workers=args.workers,
            timeout=args.timeout,
        )
    except SourceUnavailable as exc:
        logger.error("No source data available: %s", exc)
        return 1
    except ShardWriteError as exc:
        logger.error("Shard write failed: %s", exc)
        return 1

    print(f"{stats.shards_written} shards, {stats.records_parsed} records -> {args.out_dir}")
    return 0


def run_search(args: argparse.Namespace) -> int:
    if args.region is not None:
        title = f"region '{args.region}'"
        results = search_by_region(args.out_dir, args.region)
    elif args.name is not None:
        title = f"name '{args.name}'"
        results = search_by_name(args.out_dir, args.name)
    else:
        title = f"IBGE code '{args.code}'"
        results = search_by_code(args.out_dir, args.code)

    print(f"--- Results for {title} ({len(results)} found) ---")
    for record in results:
        print(record)
    return 0


def main() -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    # Configure logging based on --log-level
    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    if args.command == "build":
        if args.workers is not None and args.workers < 1:
            parser.error(f"--workers must be positive, got {args.workers}")
        return run_build(args)
    return run_search(args)


if __name__ == "__main__":
    sys.exit(main())
