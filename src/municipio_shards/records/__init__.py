from municipio_shards.records.parse import ParseStats, iter_records, parse_line, parse_lines
from municipio_shards.records.types import (
    EXTERIOR_REGION,
    FingerprintedRecord,
    MunicipioRecord,
    is_exterior,
    name_sort_key,
)

__all__ = [
    "EXTERIOR_REGION",
    "FingerprintedRecord",
    "MunicipioRecord",
    "ParseStats",
    "is_exterior",
    "iter_records",
    "name_sort_key",
    "parse_line",
    "parse_lines",
]
