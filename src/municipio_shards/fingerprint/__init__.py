from municipio_shards.fingerprint.config import DEFAULT_CONFIG, FingerprintConfig
from municipio_shards.fingerprint.derive import build_salt, derive, fingerprint_record

__all__ = ["DEFAULT_CONFIG", "FingerprintConfig", "build_salt", "derive", "fingerprint_record"]
