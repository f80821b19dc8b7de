"""Per-region shard writing: concurrent fingerprinting and atomic persistence."""

import logging
import os
import tempfile
import time
from collections.abc import Iterable
from concurrent.futures import Executor
from functools import partial
from pathlib import Path

from municipio_shards.errors import ShardWriteError
from municipio_shards.fingerprint import DEFAULT_CONFIG, FingerprintConfig, fingerprint_record
from municipio_shards.execution import map_chunksize
from municipio_shards.records.types import FingerprintedRecord, MunicipioRecord, name_sort_key
from municipio_shards.shard.format import encode_records, shard_filename

logger = logging.getLogger(__name__)

def shard_path(out_dir: str | Path, region: str) -> Path:
    return Path(out_dir) / shard_filename(region)


def fingerprint_records(
    records: Iterable[MunicipioRecord],
    config: FingerprintConfig = DEFAULT_CONFIG,
    executor: Executor | None = None,
) -> list[FingerprintedRecord]:
    """
    Fingerprint records, fanning out over executor when given.

    Completion order is not relied upon: results are gathered at one join
    point and sorted by preferred name before being returned.
    """
    ordered = sorted(records, key=name_sort_key)
    task = partial(fingerprint_record, config=config)

    if executor is None:
        fingerprinted = [task(record) for record in ordered]
    else:
        fingerprinted = list(executor.map(task, ordered, chunksize=map_chunksize(executor)))

    fingerprinted.sort(key=name_sort_key)
    return fingerprinted


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data to a sibling temp file, fsync it, then replace path."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_shard(
    out_dir: str | Path,
    region: str,
    records: Iterable[MunicipioRecord],
    config: FingerprintConfig = DEFAULT_CONFIG,
    executor: Executor | None = None,
) -> Path:
    """
    Fingerprint and persist one region's records.

    An existing shard for the region is replaced atomically; on failure the
    previous file (if any) is left untouched and ShardWriteError is raised.
    """
    start = time.perf_counter()
    region = region.upper()
    target = shard_path(out_dir, region)

    fingerprinted = fingerprint_records(records, config, executor)
    payload = encode_records(fingerprinted)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(target, payload)
    except OSError as exc:
        raise ShardWriteError(region, str(exc)) from exc

    logger.info(
        "Shard %s: %d records, %d bytes in %.2fs",
        region,
        len(fingerprinted),
        len(payload),
        time.perf_counter() - start,
    )
    return target
