"""
Binary shard container.

Layout (all integers little-endian):

    int32   record_count
    repeated record_count times:
        6 x (uint32 byte_length, UTF-8 bytes)

The six strings are, in order: tom, ibge, name_tom, name_ibge, region,
fingerprint.
"""

import struct

from municipio_shards.records.types import FingerprintedRecord

SHARD_PREFIX = "municipios"
SHARD_SUFFIX = ".bin"

COUNT_STRUCT = struct.Struct("<i")
LENGTH_STRUCT = struct.Struct("<I")

FIELDS_PER_RECORD = 6


class ShardFormatError(ValueError):
    """Raised by decode_records when the byte stream is not a valid shard."""


def shard_filename(region: str) -> str:
    return f"{SHARD_PREFIX}_{region.upper()}{SHARD_SUFFIX}"


def encode_records(records: list[FingerprintedRecord]) -> bytes:
    """Serialize records in the given order."""
    chunks = [COUNT_STRUCT.pack(len(records))]
    for record in records:
        for value in record.fields():
            data = value.encode("utf-8")
            chunks.append(LENGTH_STRUCT.pack(len(data)))
            chunks.append(data)
    return b"".join(chunks)


def decode_records(data: bytes) -> list[FingerprintedRecord]:
    """
    Deserialize a whole shard.

    Raises ShardFormatError on a negative count, a length prefix running past
    the end of the data, invalid UTF-8, or bytes left over after the last record.
    """
    view = memoryview(data)
    if len(view) < COUNT_STRUCT.size:
        raise ShardFormatError("missing record count")

    (count,) = COUNT_STRUCT.unpack_from(view, 0)
    if count < 0:
        raise ShardFormatError(f"negative record count {count}")

    offset = COUNT_STRUCT.size
    records: list[FingerprintedRecord] = []

    for index in range(count):
        values: list[str] = []
        for _ in range(FIELDS_PER_RECORD):
            if offset + LENGTH_STRUCT.size > len(view):
                raise ShardFormatError(f"truncated length prefix in record {index}")
            (length,) = LENGTH_STRUCT.unpack_from(view, offset)
            offset += LENGTH_STRUCT.size

            end = offset + length
            if end > len(view):
                raise ShardFormatError(
                    f"field of {length} bytes in record {index} runs past end of data"
                )
            try:
                values.append(bytes(view[offset:end]).decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise ShardFormatError(f"invalid UTF-8 in record {index}") from exc
            offset = end

        tom, ibge, name_tom, name_ibge, region, fingerprint = values
        if not fingerprint:
            raise ShardFormatError(f"record {index} has no fingerprint")
        records.append(
            FingerprintedRecord(
                tom=tom,
                ibge=ibge,
                name_tom=name_tom,
                name_ibge=name_ibge,
                region=region,
                fingerprint=fingerprint,
            )
        )

    if offset != len(view):
        raise ShardFormatError(
            f"{len(view) - offset} trailing bytes after {count} records (count mismatch)"
        )

    return records
