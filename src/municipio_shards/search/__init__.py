from municipio_shards.search.search import (
    load_shards,
    search_by_code,
    search_by_name,
    search_by_region,
)

__all__ = ["load_shards", "search_by_code", "search_by_name", "search_by_region"]
