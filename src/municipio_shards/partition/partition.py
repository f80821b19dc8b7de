"""Grouping of parsed records into per-region partitions."""

from collections.abc import Iterable
from dataclasses import replace

from municipio_shards.partition.types import PartitionStats, RegionPartitions
from municipio_shards.records.types import MunicipioRecord, is_exterior


def partition_by_region(
    records: Iterable[MunicipioRecord],
) -> tuple[RegionPartitions, PartitionStats]:
    """
    Group records by region code.

    Keys are compared case-insensitively and returned upper-cased, in
    ascending order. The exterior sentinel and records without a region
    are dropped. Within a region, records keep their first-seen order; a
    later record with an IBGE code already seen in that region replaces
    the earlier one in place.
    """
    groups: dict[str, dict[str, MunicipioRecord]] = {}
    stats = PartitionStats()

    for record in records:
        stats.records_seen += 1
        if is_exterior(record.region):
            stats.exterior_dropped += 1
            continue

        key = record.region.strip().upper()
        if not key:
            stats.empty_region_dropped += 1
            continue

        if record.region != key:
            record = replace(record, region=key)
        group = groups.setdefault(key, {})
        if record.ibge in group:
            stats.duplicate_codes += 1
        group[record.ibge] = record

    stats.regions = len(groups)
    partitions = {region: list(groups[region].values()) for region in sorted(groups)}
    return partitions, stats
