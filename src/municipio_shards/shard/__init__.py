from municipio_shards.shard.reader import list_shards, read_shard
from municipio_shards.shard.writer import fingerprint_records, shard_path, write_shard

__all__ = ["fingerprint_records", "list_shards", "read_shard", "shard_path", "write_shard"]
