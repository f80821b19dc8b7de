"""Worker-pool selection for fingerprinting and shard loading."""

from typing import TypeAlias
import os
import sys
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from contextlib import AbstractContextManager, nullcontext

ExecutorClass: TypeAlias = type[ThreadPoolExecutor] | type[ProcessPoolExecutor] | None

# Environment variable forcing a pool kind: "threads", "processes" or "serial".
EXECUTOR_ENV = "MUNICIPIO_EXECUTOR"

# Records handed to each worker process per round trip.
PROCESS_POOL_CHUNKSIZE = 64

_POOL_KINDS: dict[str, ExecutorClass] = {
    "threads": ThreadPoolExecutor,
    "processes": ProcessPoolExecutor,
    "serial": None,
}


def is_gil_enabled() -> bool:
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def requested_kind() -> str | None:
    """Pool kind forced through MUNICIPIO_EXECUTOR, or None when unset or unknown."""
    kind = os.environ.get(EXECUTOR_ENV, "").strip().lower()
    return kind if kind in _POOL_KINDS else None


def fingerprint_pool_class() -> ExecutorClass:
    """
    Pool for key derivation, which is CPU-bound.

    Without an override, processes are used while the GIL is enabled and
    threads on free-threaded interpreters. None means run in the caller's
    thread, which keeps breakpoints usable.
    """
    kind = requested_kind()
    if kind is not None:
        return _POOL_KINDS[kind]
    return ProcessPoolExecutor if is_gil_enabled() else ThreadPoolExecutor


def reader_pool_class() -> ExecutorClass:
    """Pool for shard loads: threads, since reads are I/O-bound, unless serial is forced."""
    if requested_kind() == "serial":
        return None
    return ThreadPoolExecutor


def describe_executor(executor_class: ExecutorClass) -> str:
    for kind, candidate in _POOL_KINDS.items():
        if candidate is executor_class:
            return kind
    return executor_class.__name__


def open_executor(
    executor_class: ExecutorClass,
    workers: int | None = None,
) -> AbstractContextManager[Executor | None]:
    """Start a pool of executor_class; for serial mode the context yields None."""
    if executor_class is None:
        return nullcontext()
    return executor_class(max_workers=workers)


def map_chunksize(executor: Executor) -> int:
    """Batch size for executor.map; only process pools gain from batching."""
    if isinstance(executor, ProcessPoolExecutor):
        return PROCESS_POOL_CHUNKSIZE
    return 1
