"""Parsing utilities for semicolon-delimited registry lines."""

import unicodedata
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from municipio_shards.errors import MalformedLine
from municipio_shards.records.types import FIELD_COUNT, FIELD_SEPARATOR, MunicipioRecord

# Label of the unique-code column; its presence marks the header line.
HEADER_LABEL = "IBGE"


@dataclass
class ParseStats:
    """Statistics from parse_lines."""

    lines_read: int = 0
    header_skipped: bool = False
    empty_lines: int = 0
    malformed_lines: int = 0
    records_parsed: int = 0


def sanitize_field(value: str) -> str:
    """Drop BOM, control and format characters, then trim whitespace."""
    cleaned = "".join(
        ch for ch in value if unicodedata.category(ch) not in ("Cc", "Cf")
    )
    return cleaned.strip()


def split_fields(raw_line: str) -> list[str]:
    """
    Split a line into its five sanitized fields.

    Raises MalformedLine for blank lines and lines with fewer than five
    fields. Extra trailing fields are ignored.
    """
    if not raw_line.strip():
        raise MalformedLine("blank line")

    parts = raw_line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if len(parts) < FIELD_COUNT:
        raise MalformedLine(f"expected {FIELD_COUNT} fields, got {len(parts)}")

    return [sanitize_field(p) for p in parts[:FIELD_COUNT]]


def parse_line(raw_line: str) -> MunicipioRecord | None:
    """Parse one raw line into a record, or None if the line is malformed."""
    try:
        tom, ibge, name_tom, name_ibge, region = split_fields(raw_line)
    except MalformedLine:
        return None

    return MunicipioRecord(
        tom=tom,
        ibge=ibge,
        name_tom=name_tom,
        name_ibge=name_ibge,
        region=region.upper(),
    )


def is_header_line(line: str) -> bool:
    return HEADER_LABEL in sanitize_field(line).upper()


def iter_records(lines: Iterable[str]) -> Iterator[MunicipioRecord]:
    """Yield parsed records from raw lines, skipping invalid ones."""
    for raw_line in lines:
        parsed = parse_line(raw_line)
        if parsed is not None:
            yield parsed


def parse_lines(lines: Iterable[str]) -> tuple[list[MunicipioRecord], ParseStats]:
    """
    Parse a whole dataset, skipping a leading header line if present.

    Blank and malformed lines are counted and skipped; they never abort
    parsing of the lines that follow.
    """
    stats = ParseStats()
    records: list[MunicipioRecord] = []

    for index, raw_line in enumerate(lines):
        stats.lines_read += 1
        if index == 0 and is_header_line(raw_line):
            stats.header_skipped = True
            continue

        if not raw_line.strip():
            stats.empty_lines += 1
            continue

        parsed = parse_line(raw_line)
        if parsed is None:
            stats.malformed_lines += 1
            continue

        records.append(parsed)
        stats.records_parsed += 1

    return records, stats
