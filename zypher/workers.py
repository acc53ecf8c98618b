"""
Zypher Background Workers
=========================

Run the blocking primitives off the caller's thread.

- :class:`CryptoWorkerPool` wraps a thread pool; every submission returns
  a :class:`concurrent.futures.Future` resolving to a :class:`JobResult`
  with the value and elapsed time.
- ``*_async`` coroutines await the same operations from asyncio code.

Jobs cannot be cancelled once running and no timeout is imposed here;
pass ``timeout=`` to ``Future.result`` if you need one.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from zypher import algo, envelope
from zypher.algo import KeyPair, PrivateKey, PublicKey
from zypher.config import settings
from zypher.envelope import EncryptedKey, SealedFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobResult:
    value: Any
    elapsed: float  # seconds


def _timed(name: str, fn: Callable[..., Any], *args: Any) -> JobResult:
    t0 = time.perf_counter()
    try:
        value = fn(*args)
    except algo.ZypherError as exc:
        logger.warning("%s failed (%s): %s", name, exc.kind, exc)
        raise
    elapsed = time.perf_counter() - t0
    logger.debug("%s finished in %.3fs", name, elapsed)
    return JobResult(value=value, elapsed=elapsed)


class CryptoWorkerPool:
    """Thread pool for concurrent key generation, seal and open jobs."""

    def __init__(self, max_workers: Optional[int] = None):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_workers,
            thread_name_prefix="zypher",
        )

    def __enter__(self) -> "CryptoWorkerPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def submit_generate_key_pair(self) -> "Future[JobResult]":
        return self._executor.submit(_timed, "generate_key_pair", algo.generate_key_pair)

    def submit_seal(self, file_bytes: bytes, public_key: PublicKey) -> "Future[JobResult]":
        return self._executor.submit(
            _timed, "seal_file", envelope.seal_file, file_bytes, public_key
        )

    def submit_open(
        self,
        encrypted_file: bytes,
        encrypted_key: Union[str, bytes, EncryptedKey],
        private_key: PrivateKey,
    ) -> "Future[JobResult]":
        return self._executor.submit(
            _timed, "open_file", envelope.open_file,
            encrypted_file, encrypted_key, private_key,
        )


# ---------------------------------------------------------------------------
# asyncio front
# ---------------------------------------------------------------------------


async def _run(executor: Optional[Executor], fn: Callable[..., Any], *args: Any) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(fn, *args))


async def generate_key_pair_async(executor: Optional[Executor] = None) -> KeyPair:
    return await _run(executor, algo.generate_key_pair)


async def seal_file_async(
    file_bytes: bytes,
    public_key: PublicKey,
    executor: Optional[Executor] = None,
) -> SealedFile:
    return await _run(executor, envelope.seal_file, file_bytes, public_key)


async def open_file_async(
    encrypted_file: bytes,
    encrypted_key: Union[str, bytes, EncryptedKey],
    private_key: PrivateKey,
    executor: Optional[Executor] = None,
) -> bytes:
    return await _run(executor, envelope.open_file, encrypted_file, encrypted_key, private_key)
