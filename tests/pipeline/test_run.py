"""Tests for the build pipeline."""

from pathlib import Path

import pytest

from municipio_shards import execution
from municipio_shards.errors import SourceUnavailable
from municipio_shards.fingerprint import FingerprintConfig
from municipio_shards.pipeline import build_shards, run
from municipio_shards.shard import list_shards, read_shard


class TestBuildShards:
    """Test cases for build_shards."""

    def test_writes_one_shard_per_region(
        self, tmp_path: Path, sample_lines: list[str], fast_config: FingerprintConfig
    ) -> None:
        stats = build_shards(sample_lines, tmp_path, config=fast_config)

        assert [p.name for p in stats.shard_paths] == [
            "municipios_MG.bin",
            "municipios_RJ.bin",
            "municipios_SP.bin",
        ]
        assert stats.shards_written == 3
        assert stats.records_parsed == 6
        assert stats.malformed_lines == 1
        assert stats.exterior_dropped == 1
        assert list_shards(tmp_path) == stats.shard_paths

    def test_every_record_fingerprinted(
        self, tmp_path: Path, sample_lines: list[str], fast_config: FingerprintConfig
    ) -> None:
        build_shards(sample_lines, tmp_path, config=fast_config)
        records = [r for path in list_shards(tmp_path) for r in read_shard(path)]

        assert len(records) == 5
        assert all(len(r.fingerprint) == fast_config.hex_length for r in records)

    def test_deterministic_across_runs_and_executors(
        self,
        tmp_path: Path,
        sample_lines: list[str],
        fast_config: FingerprintConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        build_shards(sample_lines, tmp_path / "serial", config=fast_config)

        monkeypatch.setenv(execution.EXECUTOR_ENV, "threads")
        shuffled = sample_lines[:1] + list(reversed(sample_lines[1:]))
        build_shards(shuffled, tmp_path / "threads", config=fast_config, workers=3)

        for name in ("municipios_MG.bin", "municipios_RJ.bin", "municipios_SP.bin"):
            serial = (tmp_path / "serial" / name).read_bytes()
            assert serial == (tmp_path / "threads" / name).read_bytes()

    def test_records_without_region_get_no_shard(
        self, tmp_path: Path, fast_config: FingerprintConfig
    ) -> None:
        lines = ["0001;3509502;CAMPINAS;Campinas;SP", "0002;1234567;SEM UF;Sem UF;"]
        stats = build_shards(lines, tmp_path, config=fast_config)

        assert stats.empty_region_dropped == 1
        assert [p.name for p in list_shards(tmp_path)] == ["municipios_SP.bin"]
        assert not (tmp_path / "municipios_.bin").exists()

    def test_no_records(self, tmp_path: Path, fast_config: FingerprintConfig) -> None:
        stats = build_shards(["TOM;IBGE;A;B;UF", "9;9;X;X;EX"], tmp_path, config=fast_config)
        assert stats.shards_written == 0
        assert list_shards(tmp_path) == []


class TestRun:
    """Test cases for run."""

    def test_local_input(
        self, tmp_path: Path, sample_lines: list[str], fast_config: FingerprintConfig
    ) -> None:
        input_path = tmp_path / "municipios.csv"
        input_path.write_text("\n".join(sample_lines), encoding="utf-8")

        stats = run(tmp_path / "out", input_path=input_path, config=fast_config)
        assert stats.shards_written == 3

    def test_download_keeps_local_copy(
        self,
        tmp_path: Path,
        sample_lines: list[str],
        fast_config: FingerprintConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            "municipio_shards.pipeline.orchestrator.fetch_lines",
            lambda url, timeout: list(sample_lines),
        )
        local = tmp_path / "municipios.csv"

        stats = run(tmp_path / "out", local_copy=local, config=fast_config)

        assert stats.shards_written == 3
        assert local.read_text(encoding="utf-8").splitlines() == sample_lines

    def test_fetch_failure_leaves_shards_untouched(
        self,
        tmp_path: Path,
        sample_lines: list[str],
        fast_config: FingerprintConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        out_dir = tmp_path / "out"
        build_shards(sample_lines, out_dir, config=fast_config)
        before = {p.name: p.read_bytes() for p in list_shards(out_dir)}

        def unavailable(url: str, timeout: float) -> list[str]:
            raise SourceUnavailable("offline")

        monkeypatch.setattr("municipio_shards.pipeline.orchestrator.fetch_lines", unavailable)

        with pytest.raises(SourceUnavailable):
            run(out_dir, config=fast_config)

        assert {p.name: p.read_bytes() for p in list_shards(out_dir)} == before
