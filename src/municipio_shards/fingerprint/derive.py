"""Deterministic salted fingerprints for municipality records."""

import hashlib

from municipio_shards.fingerprint.config import DEFAULT_CONFIG, FingerprintConfig
from municipio_shards.records.types import FingerprintedRecord, MunicipioRecord


def build_salt(ibge: str, salt_length: int = DEFAULT_CONFIG.salt_length) -> bytes:
    """
    Derive a fixed salt from the IBGE code alone.

    The same code always yields the same salt, which keeps fingerprints stable
    across runs. The salt is not secret.
    """
    return hashlib.sha256(ibge.encode("utf-8")).digest()[:salt_length]


def derive(record: MunicipioRecord, config: FingerprintConfig = DEFAULT_CONFIG) -> str:
    """Return the lowercase hex PBKDF2 digest of the record's canonical string."""
    salt = build_salt(record.ibge, config.salt_length)
    digest = hashlib.pbkdf2_hmac(
        config.hash_name,
        record.to_canonical_string().encode("utf-8"),
        salt,
        config.iterations,
        dklen=config.dklen,
    )
    return digest.hex()


def fingerprint_record(
    record: MunicipioRecord,
    config: FingerprintConfig = DEFAULT_CONFIG,
) -> FingerprintedRecord:
    """Attach a fingerprint to a record. Top-level so process pools can pickle it."""
    return record.with_fingerprint(derive(record, config))
