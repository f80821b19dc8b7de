"""Shared metadata structures for partitioning."""

from typing import TypeAlias
from dataclasses import dataclass

from municipio_shards.records.types import MunicipioRecord

RegionCode: TypeAlias = str
RegionPartitions: TypeAlias = dict[RegionCode, list[MunicipioRecord]]


@dataclass
class PartitionStats:
    """Statistics from partition_by_region operation."""

    records_seen: int = 0
    exterior_dropped: int = 0
    empty_region_dropped: int = 0
    duplicate_codes: int = 0
    regions: int = 0
