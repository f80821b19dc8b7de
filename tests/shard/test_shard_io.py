"""Tests for shard writing and reading."""

from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from pathlib import Path

import pytest

from municipio_shards.errors import ShardReadError, ShardWriteError
from municipio_shards.fingerprint import FingerprintConfig, derive
from municipio_shards.records import MunicipioRecord
from municipio_shards.shard import (
    fingerprint_records,
    list_shards,
    read_shard,
    shard_path,
    write_shard,
)
from municipio_shards.shard import writer


def make_records() -> list[MunicipioRecord]:
    return [
        MunicipioRecord("0003", "3552205", "SOROCABA", "Sorocaba", "SP"),
        MunicipioRecord("0001", "3509502", "CAMPINAS", "Campinas", "SP"),
        MunicipioRecord("0004", "3501608", "AMERICANA", "", "SP"),
        MunicipioRecord("0002", "3506003", "BAURU", "bauru", "SP"),
    ]


class TestFingerprintRecords:
    """Test cases for fingerprint_records."""

    def test_serial_sorted_by_preferred_name(self, fast_config: FingerprintConfig) -> None:
        result = fingerprint_records(make_records(), fast_config)
        assert [r.preferred_name for r in result] == ["AMERICANA", "bauru", "Campinas", "Sorocaba"]
        assert all(r.fingerprint == derive(r.without_fingerprint(), fast_config) for r in result)

    def test_thread_pool_matches_serial(self, fast_config: FingerprintConfig) -> None:
        serial = fingerprint_records(make_records(), fast_config)
        with ThreadPoolExecutor(max_workers=4) as executor:
            threaded = fingerprint_records(reversed(make_records()), fast_config, executor)
        assert threaded == serial

    def test_process_pool_matches_serial(self, fast_config: FingerprintConfig) -> None:
        serial = fingerprint_records(make_records(), fast_config)
        with ProcessPoolExecutor(max_workers=2) as executor:
            pooled = fingerprint_records(make_records(), fast_config, executor)
        assert pooled == serial


class TestWriteShard:
    """Test cases for write_shard."""

    def test_round_trip_in_name_order(self, tmp_path: Path, fast_config: FingerprintConfig) -> None:
        path = write_shard(tmp_path, "sp", make_records(), fast_config)

        assert path == tmp_path / "municipios_SP.bin"
        loaded = read_shard(path)
        assert [r.ibge for r in loaded] == ["3501608", "3506003", "3509502", "3552205"]
        assert {r.without_fingerprint() for r in loaded} == set(make_records())
        assert all(len(r.fingerprint) == 64 for r in loaded)

    def test_output_independent_of_input_order(
        self, tmp_path: Path, fast_config: FingerprintConfig
    ) -> None:
        first = write_shard(tmp_path / "a", "SP", make_records(), fast_config)
        second = write_shard(tmp_path / "b", "SP", list(reversed(make_records())), fast_config)
        assert first.read_bytes() == second.read_bytes()

    def test_overwrites_existing_shard(self, tmp_path: Path, fast_config: FingerprintConfig) -> None:
        write_shard(tmp_path, "SP", make_records(), fast_config)
        write_shard(tmp_path, "SP", make_records()[:1], fast_config)

        assert [r.ibge for r in read_shard(shard_path(tmp_path, "SP"))] == ["3552205"]
        assert [p.name for p in tmp_path.iterdir()] == ["municipios_SP.bin"]

    def test_failed_write_keeps_previous_file(
        self,
        tmp_path: Path,
        fast_config: FingerprintConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        path = write_shard(tmp_path, "SP", make_records(), fast_config)
        before = path.read_bytes()

        def fail_replace(src: str, dst: str) -> None:
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(writer.os, "replace", fail_replace)

        with pytest.raises(ShardWriteError) as excinfo:
            write_shard(tmp_path, "SP", make_records()[:1], fast_config)

        assert excinfo.value.region == "SP"
        assert path.read_bytes() == before
        assert [p.name for p in tmp_path.iterdir()] == ["municipios_SP.bin"]

    def test_unwritable_directory(self, tmp_path: Path, fast_config: FingerprintConfig) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file")
        with pytest.raises(ShardWriteError):
            write_shard(blocker, "SP", make_records(), fast_config)


class TestReadShard:
    """Test cases for read_shard and list_shards."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ShardReadError):
            read_shard(tmp_path / "municipios_XX.bin")

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "municipios_SP.bin"
        path.write_bytes(b"\x05\x00\x00\x00garbage")
        with pytest.raises(ShardReadError) as excinfo:
            read_shard(path)
        assert excinfo.value.path == str(path)

    def test_list_shards(self, tmp_path: Path, fast_config: FingerprintConfig) -> None:
        write_shard(tmp_path, "SP", make_records(), fast_config)
        write_shard(tmp_path, "AC", make_records()[:1], fast_config)
        (tmp_path / "notes.txt").write_text("ignored")

        assert [p.name for p in list_shards(tmp_path)] == ["municipios_AC.bin", "municipios_SP.bin"]

    def test_list_shards_missing_dir(self, tmp_path: Path) -> None:
        assert list_shards(tmp_path / "missing") == []
