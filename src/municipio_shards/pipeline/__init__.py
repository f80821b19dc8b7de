from municipio_shards.pipeline.orchestrator import PipelineStats, build_shards, run

__all__ = ["PipelineStats", "build_shards", "run"]
