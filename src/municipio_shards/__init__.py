"""Municipio Shards - Fingerprint municipal registry records into per-region binary shards."""

from municipio_shards.pipeline import build_shards, run
from municipio_shards.search import search_by_code, search_by_name, search_by_region

__all__ = ["build_shards", "run", "search_by_code", "search_by_name", "search_by_region"]
