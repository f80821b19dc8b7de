"""Queries across the shard set: by region, by name substring, by IBGE code."""

from typing import TypeAlias
import logging
from collections.abc import Callable
from pathlib import Path

from municipio_shards.errors import ShardReadError
from municipio_shards.execution import open_executor, reader_pool_class
from municipio_shards.records.types import FingerprintedRecord, name_sort_key
from municipio_shards.shard.reader import list_shards, read_shard
from municipio_shards.shard.writer import shard_path

logger = logging.getLogger(__name__)

RecordFilter: TypeAlias = Callable[[FingerprintedRecord], bool]


def load_shard_safely(path: str | Path) -> list[FingerprintedRecord]:
    """Read one shard, treating a corrupt or unreadable file as empty."""
    try:
        return read_shard(path)
    except ShardReadError as exc:
        logger.warning("Skipping shard: %s", exc)
        return []


def load_shards(
    paths: list[Path],
    workers: int | None = None,
) -> list[list[FingerprintedRecord]]:
    """Load several shards, in parallel unless serial mode is forced. Order follows paths."""
    executor_class = reader_pool_class() if len(paths) > 1 else None
    with open_executor(executor_class, workers) as executor:
        if executor is None:
            return [load_shard_safely(path) for path in paths]
        return list(executor.map(load_shard_safely, paths))


def _scan(
    out_dir: str | Path,
    keep: RecordFilter,
    workers: int | None = None,
) -> list[FingerprintedRecord]:
    paths = list_shards(out_dir)
    logger.debug("Scanning %d shards under %s", len(paths), out_dir)
    return [
        record
        for records in load_shards(paths, workers)
        for record in records
        if keep(record)
    ]


def search_by_region(out_dir: str | Path, code: str) -> list[FingerprintedRecord]:
    """Return the whole shard for a region code; unknown regions yield no records."""
    code = code.strip().upper()
    if not code.isalnum():
        return []

    path = shard_path(out_dir, code)
    if not path.is_file():
        logger.info("No shard for region %s", code)
        return []
    return load_shard_safely(path)


def search_by_name(
    out_dir: str | Path,
    term: str,
    workers: int | None = None,
) -> list[FingerprintedRecord]:
    """Case-insensitive substring match on the preferred name across all shards."""
    needle = term.strip().casefold()
    if not needle:
        return []

    matches = _scan(out_dir, lambda r: needle in r.preferred_name.casefold(), workers)
    matches.sort(key=name_sort_key)
    return matches


def search_by_code(
    out_dir: str | Path,
    code: str,
    workers: int | None = None,
) -> list[FingerprintedRecord]:
    """
    Exact IBGE code match across all shards.

    The code is expected to be unique, but every match is returned so that
    duplicates spread over several shards stay visible.
    """
    code = code.strip()
    if not code:
        return []

    matches = _scan(out_dir, lambda r: r.ibge == code, workers)
    if len(matches) > 1:
        logger.warning("IBGE code %s found in %d records", code, len(matches))
    return matches
