from municipio_shards.partition.partition import partition_by_region
from municipio_shards.partition.types import PartitionStats, RegionPartitions

__all__ = ["PartitionStats", "RegionPartitions", "partition_by_region"]
