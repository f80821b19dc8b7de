"""Key-derivation parameters for record fingerprints."""

import hashlib
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FingerprintConfig:
    """
    PBKDF2 parameters used to fingerprint records.

    Fingerprints computed under different configurations are not comparable,
    so a shard set must be built with a single instance end to end.
    """

    iterations: int = 10_000
    dklen: int = 32
    hash_name: str = "sha256"
    salt_length: int = 16

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if self.dklen < 1:
            raise ValueError(f"dklen must be positive, got {self.dklen}")
        if not 1 <= self.salt_length <= hashlib.sha256().digest_size:
            raise ValueError(f"salt_length must be within 1..32, got {self.salt_length}")
        if self.hash_name not in hashlib.algorithms_available:
            raise ValueError(f"unknown hash algorithm: {self.hash_name}")

    @property
    def hex_length(self) -> int:
        return self.dklen * 2


# The canonical configuration for persisted shards.
DEFAULT_CONFIG = FingerprintConfig()
