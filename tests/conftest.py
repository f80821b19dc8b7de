"""Shared fixtures."""

import pytest

from municipio_shards.fingerprint import FingerprintConfig
from municipio_shards import execution


@pytest.fixture(autouse=True)
def serial_executor(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run pools serially unless a test overrides the policy itself."""
    monkeypatch.setenv(execution.EXECUTOR_ENV, "serial")


@pytest.fixture
def fast_config() -> FingerprintConfig:
    """Cheap key-derivation parameters; production uses DEFAULT_CONFIG."""
    return FingerprintConfig(iterations=10, dklen=32)


@pytest.fixture
def sample_lines() -> list[str]:
    return [
        "TOM;IBGE;Nome TOM;Nome IBGE;UF",
        "0001;3509502;CAMPINAS;Campinas;SP",
        "0002;3550308;SAO PAULO;São Paulo;SP",
        "0003;3304557;RIO DE JANEIRO;Rio de Janeiro;RJ",
        "0004;3303302;NITEROI;;rj",
        "9999;9999999;EXTERIOR;Exterior;EX",
        "",
        "broken;line",
        "0005;3106200;BELO HORIZONTE;Belo Horizonte;MG",
    ]
