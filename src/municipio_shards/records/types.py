"""Shared type definitions for municipality records."""

from dataclasses import dataclass

# Region code used by the registry for municipalities outside the country.
EXTERIOR_REGION = "EX"

# Number of raw fields carried by every input line.
FIELD_COUNT = 5

FIELD_SEPARATOR = ";"


def is_exterior(region: str) -> bool:
    """Return True if region is the exterior sentinel (case-insensitive)."""
    return region.strip().upper() == EXTERIOR_REGION


def preferred_name_of(name_tom: str, name_ibge: str) -> str:
    """IBGE name when it has content, otherwise the TOM name."""
    return name_ibge if name_ibge.strip() else name_tom


def name_sort_key(record: "MunicipioRecord | FingerprintedRecord") -> tuple[str, str]:
    """
    Case-insensitive ordering by preferred name, ties broken by IBGE code.

    Names are compared upper-cased, so "_" sorts after letters.
    """
    return record.preferred_name.upper(), record.ibge


@dataclass(frozen=True, slots=True)
class MunicipioRecord:
    """One parsed registry line: TOM;IBGE;Nome TOM;Nome IBGE;UF."""

    tom: str
    ibge: str
    name_tom: str
    name_ibge: str
    region: str

    @property
    def preferred_name(self) -> str:
        return preferred_name_of(self.name_tom, self.name_ibge)

    def to_canonical_string(self) -> str:
        """Concatenate the five raw fields; this is the fingerprint input."""
        return FIELD_SEPARATOR.join(
            (self.tom, self.ibge, self.name_tom, self.name_ibge, self.region)
        )

    def with_fingerprint(self, fingerprint: str) -> "FingerprintedRecord":
        return FingerprintedRecord(
            tom=self.tom,
            ibge=self.ibge,
            name_tom=self.name_tom,
            name_ibge=self.name_ibge,
            region=self.region,
            fingerprint=fingerprint,
        )

    def __str__(self) -> str:
        return f"[IBGE: {self.ibge}] {self.preferred_name} - {self.region}"


@dataclass(frozen=True, slots=True)
class FingerprintedRecord:
    """A record with its fingerprint attached; the only form written to shards."""

    tom: str
    ibge: str
    name_tom: str
    name_ibge: str
    region: str
    fingerprint: str

    def __post_init__(self) -> None:
        if not self.fingerprint:
            raise ValueError(f"record {self.ibge!r} has an empty fingerprint")

    @property
    def preferred_name(self) -> str:
        return preferred_name_of(self.name_tom, self.name_ibge)

    def to_canonical_string(self) -> str:
        return self.without_fingerprint().to_canonical_string()

    def without_fingerprint(self) -> MunicipioRecord:
        return MunicipioRecord(
            tom=self.tom,
            ibge=self.ibge,
            name_tom=self.name_tom,
            name_ibge=self.name_ibge,
            region=self.region,
        )

    def fields(self) -> tuple[str, str, str, str, str, str]:
        """Fields in on-disk order."""
        return (
            self.tom,
            self.ibge,
            self.name_tom,
            self.name_ibge,
            self.region,
            self.fingerprint,
        )

    def __str__(self) -> str:
        return f"[IBGE: {self.ibge}] {self.preferred_name} - {self.region}"
