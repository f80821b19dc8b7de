import logging
import os
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from municipio_shards.fingerprint import DEFAULT_CONFIG, FingerprintConfig
from municipio_shards.partition import partition_by_region
from municipio_shards.execution import (
    EXECUTOR_ENV,
    describe_executor,
    fingerprint_pool_class,
    is_gil_enabled,
    open_executor,
)
from municipio_shards.pipeline.source import (
    DEFAULT_SOURCE_URL,
    DEFAULT_TIMEOUT,
    fetch_lines,
    read_local_lines,
    refresh_local_copy,
)
from municipio_shards.records import parse_lines
from municipio_shards.shard import write_shard

logger = logging.getLogger(__name__)

DEFAULT_OUT_DIR = "dados_binarios_por_uf"


@dataclass
class PipelineStats:
    """Outcome of one build run."""

    lines_read: int = 0
    records_parsed: int = 0
    malformed_lines: int = 0
    exterior_dropped: int = 0
    empty_region_dropped: int = 0
    duplicate_codes: int = 0
    shard_paths: list[Path] = field(default_factory=list)
    parse_seconds: float = 0.0
    write_seconds: float = 0.0

    @property
    def shards_written(self) -> int:
        return len(self.shard_paths)


def build_shards(
    lines: Iterable[str],
    out_dir: str | Path,
    config: FingerprintConfig = DEFAULT_CONFIG,
    workers: int | None = None,
) -> PipelineStats:
    """
    Turn raw registry lines into one shard per region.

    1. Parse lines into records (malformed lines skipped)
    2. Partition by region, dropping the exterior sentinel
    3. Fingerprint and write each region, in alphabetical order
    """
    stats = PipelineStats()

    executor_class = fingerprint_pool_class()
    executor_name = describe_executor(executor_class)
    gil_status = "enabled" if is_gil_enabled() else "disabled"
    workers_desc = "auto" if workers is None else str(workers)
    executor_override = os.environ.get(EXECUTOR_ENV, "")
    override_info = f", {EXECUTOR_ENV}={executor_override}" if executor_override else ""

    logger.info(
        f"Starting: out_dir={out_dir}, iterations={config.iterations}, dklen={config.dklen}, "
        f"workers={workers_desc}, executor={executor_name}, GIL={gil_status}{override_info}"
    )

    t1_start = time.perf_counter()
    records, parse_stats = parse_lines(lines)
    partitions, partition_stats = partition_by_region(records)
    stats.parse_seconds = time.perf_counter() - t1_start

    stats.lines_read = parse_stats.lines_read
    stats.records_parsed = parse_stats.records_parsed
    stats.malformed_lines = parse_stats.malformed_lines
    stats.exterior_dropped = partition_stats.exterior_dropped
    stats.empty_region_dropped = partition_stats.empty_region_dropped
    stats.duplicate_codes = partition_stats.duplicate_codes

    if parse_stats.malformed_lines > 0:
        logger.warning(
            "Parse: %d malformed lines skipped (read=%d, parsed=%d)",
            parse_stats.malformed_lines,
            parse_stats.lines_read,
            parse_stats.records_parsed,
        )
    if partition_stats.empty_region_dropped > 0:
        logger.warning(
            "Partition: %d records without a region skipped",
            partition_stats.empty_region_dropped,
        )
    if partition_stats.duplicate_codes > 0:
        logger.warning(
            "Partition: %d duplicate IBGE codes, later records kept",
            partition_stats.duplicate_codes,
        )

    logger.info(
        "Parse done: %d records in %d regions (%d exterior dropped) in %.2fs",
        parse_stats.records_parsed,
        partition_stats.regions,
        partition_stats.exterior_dropped,
        stats.parse_seconds,
    )

    if not partitions:
        logger.info("No records to write")
        return stats

    t2_start = time.perf_counter()
    with open_executor(executor_class, workers) as executor:
        for region, region_records in partitions.items():
            logger.info("Processing region %s (%d records)", region, len(region_records))
            path = write_shard(out_dir, region, region_records, config, executor)
            stats.shard_paths.append(path)
    stats.write_seconds = time.perf_counter() - t2_start

    logger.info(
        "Write done: %d shards in %.2fs (total %.2fs)",
        stats.shards_written,
        stats.write_seconds,
        stats.parse_seconds + stats.write_seconds,
    )
    return stats


def run(
    out_dir: str | Path = DEFAULT_OUT_DIR,
    source_url: str = DEFAULT_SOURCE_URL,
    input_path: str | Path | None = None,
    local_copy: str | Path | None = None,
    diff_path: str | Path | None = None,
    config: FingerprintConfig = DEFAULT_CONFIG,
    workers: int | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> PipelineStats:
    """
    Fetch the dataset, then build the shard set.

    Lines come from input_path when given, otherwise from source_url. When
    downloading with local_copy set, the previous copy is diffed against the
    new one before being replaced. Retrieval happens before any shard is
    touched, so SourceUnavailable leaves the existing shard set intact.
    """
    if input_path is not None:
        lines = read_local_lines(input_path)
    else:
        lines = fetch_lines(source_url, timeout=timeout)
        if local_copy is not None:
            local = Path(local_copy)
            diff = Path(diff_path) if diff_path is not None else local.with_name("diferencas.csv")
            refresh_local_copy(lines, local, diff)

    return build_shards(lines, out_dir, config=config, workers=workers)
