"""Check factories that build zero-argument callables usable as probes.

Supports: thread count, DNS resolve, memory allocation, TCP connect, HTTP GET.
Every factory returns a ``Check``: it returns on success and raises with a
descriptive message on failure. ``timeout_check`` and ``AsyncCheck`` wrap any
other check.

The default registry wires only the thread, DNS and memory checks; the TCP,
HTTP, timeout and async checks are opt-in for callers building their own.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any

import httpx

from ..runtime.memstats import MemStats, bytes_to_mib, read_mem_stats
from .probes import Check

logger = logging.getLogger(__name__)


class CheckTimeout(Exception):
    """Raised when a check does not finish inside its deadline."""


def _call_with_deadline(fn: Callable[[], Any], timeout_ms: int) -> Any:
    """Run ``fn`` on its own daemon thread and wait at most ``timeout_ms``.

    A timed-out call keeps only its own thread; other checks never queue
    behind it.
    """
    future: Future[Any] = Future()

    def target() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(fn())
        except Exception as e:
            future.set_exception(e)

    threading.Thread(target=target, name="check-deadline", daemon=True).start()
    try:
        return future.result(timeout=timeout_ms / 1000)
    except FutureTimeout:
        raise CheckTimeout(f"timed out after {timeout_ms}ms") from None


# ── Process checks ───────────────────────────────────────────────────────────


def worker_count_check(
    threshold: int,
    counter: Callable[[], int] = threading.active_count,
) -> Check:
    """Fail when more than ``threshold`` threads are alive."""

    def check() -> None:
        count = counter()
        if count > threshold:
            raise RuntimeError(f"too many threads ({count} > {threshold})")

    return check


def memory_check(
    limit_mib: int,
    reader: Callable[[], MemStats] = read_mem_stats,
) -> Check:
    """Fail when allocated memory exceeds ``limit_mib``."""

    def check() -> None:
        alloc_mib = bytes_to_mib(reader().alloc)
        if alloc_mib > limit_mib:
            raise RuntimeError(f"too large memory allocation ({alloc_mib})")

    return check


# ── Network checks ───────────────────────────────────────────────────────────


def _lookup_host(hostname: str) -> list[str]:
    addrs = socket.getaddrinfo(hostname, None)
    return sorted({a[4][0] for a in addrs})


def dns_resolve_check(
    hostname: str,
    timeout_ms: int = 5_000,
    resolver: Callable[[str], list[str]] = _lookup_host,
) -> Check:
    """Fail when ``hostname`` cannot be resolved inside ``timeout_ms``.

    ``getaddrinfo`` takes no timeout, so the lookup runs on a worker thread
    and the caller stops waiting at the deadline.
    """

    def check() -> None:
        try:
            addrs = _call_with_deadline(lambda: resolver(hostname), timeout_ms)
        except CheckTimeout:
            raise CheckTimeout(
                f"DNS lookup of {hostname} timed out after {timeout_ms}ms"
            ) from None
        except socket.gaierror as e:
            raise RuntimeError(f"DNS resolution failed for {hostname}: {e}") from e
        if not addrs:
            raise RuntimeError(f"DNS lookup of {hostname} returned no results")

    return check


def tcp_dial_check(hostname: str, port: int, timeout_ms: int = 5_000) -> Check:
    """Fail when a TCP connection to ``hostname:port`` cannot be opened."""

    def check() -> None:
        try:
            sock = socket.create_connection((hostname, port), timeout=timeout_ms / 1000)
        except OSError as e:
            raise RuntimeError(
                f"TCP connect to {hostname}:{port} failed: {type(e).__name__}: {e}"
            ) from e
        sock.close()

    return check


def http_get_check(url: str, timeout_ms: int = 10_000) -> Check:
    """Fail unless a GET to ``url`` answers 200."""

    def check() -> None:
        try:
            with httpx.Client(timeout=timeout_ms / 1000, follow_redirects=True) as client:
                resp = client.get(url)
        except httpx.TimeoutException:
            raise CheckTimeout(f"GET {url} timed out after {timeout_ms}ms") from None
        except httpx.HTTPError as e:
            raise RuntimeError(f"GET {url} failed: {type(e).__name__}: {e}") from e
        if resp.status_code != 200:
            raise RuntimeError(f"GET {url} returned status {resp.status_code}")

    return check


# ── Wrappers ─────────────────────────────────────────────────────────────────


def timeout_check(check: Check, timeout_ms: int) -> Check:
    """Bound any check by a deadline."""

    def wrapped() -> None:
        _call_with_deadline(check, timeout_ms)

    return wrapped


class AsyncCheck:
    """Runs a slow check in the background and serves its cached outcome.

    The instance is itself a check. Until the first background run finishes
    it fails with ``no data yet``.
    """

    def __init__(self, check: Check, interval_s: float) -> None:
        self._check = check
        self._interval = interval_s
        self._error: str | None = "no data yet"
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> AsyncCheck:
        if self._thread is not None:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="async-check", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval + 1)
            self._thread = None

    def run_once(self) -> None:
        """Execute the wrapped check now and cache its outcome."""
        t0 = time.perf_counter()
        try:
            self._check()
            error = None
        except Exception as e:
            error = str(e) or type(e).__name__
        with self._lock:
            self._error = error
        logger.debug(
            "Async check refreshed in %.1fms: %s",
            (time.perf_counter() - t0) * 1000, error or "OK",
        )

    def _loop(self) -> None:
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self._interval)

    def __call__(self) -> None:
        with self._lock:
            error = self._error
        if error is not None:
            raise RuntimeError(error)
