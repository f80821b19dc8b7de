"""Loading of binary shard files."""

from pathlib import Path

from municipio_shards.errors import ShardReadError
from municipio_shards.records.types import FingerprintedRecord
from municipio_shards.shard.format import (
    SHARD_PREFIX,
    SHARD_SUFFIX,
    ShardFormatError,
    decode_records,
)


def read_shard(path: str | Path) -> list[FingerprintedRecord]:
    """
    Read all records from a shard file, in on-disk order.

    Raises ShardReadError if the file cannot be read or is corrupt.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ShardReadError(str(path), f"cannot read shard: {exc}") from exc

    try:
        return decode_records(data)
    except ShardFormatError as exc:
        raise ShardReadError(str(path), str(exc)) from exc


def list_shards(out_dir: str | Path) -> list[Path]:
    """Return shard files under out_dir, sorted by name. A missing directory has none."""
    root = Path(out_dir)
    if not root.is_dir():
        return []
    return sorted(p for p in root.glob(f"{SHARD_PREFIX}_*{SHARD_SUFFIX}") if p.is_file())
