"""Pytest configuration file with a fixture to check thread spawning capability."""

import inspect
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError

import numpy as np
import pytest

import smoothkit.utils.concurrency as conc

__all__ = ["extra_threads_ok"]


@pytest.fixture(autouse=True, scope="session")
def _limit_blas_threads():
    os.environ.setdefault("OMP_NUM_THREADS", "1")
    os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
    os.environ.setdefault("MKL_NUM_THREADS", "1")
    os.environ.setdefault("VECLIB_MAXIMUM_THREADS", "1")
    os.environ.setdefault("NUMEXPR_NUM_THREADS", "1")


@pytest.fixture(scope="session")
def threads_ok():
    """Return a callable that checks thread-spawning capability.

    The returned function has signature `check(n=2, timeout=1.0) -> bool` and
    returns True if at least `n` threads can be started and joined within `timeout`.
    """
    def _can_spawn(n: int = 2, timeout: float = 1.0) -> bool:
        try:
            with ThreadPoolExecutor(max_workers=n) as ex:
                futs = [ex.submit(lambda: None) for _ in range(n)]
                for f in futs:
                    f.result(timeout=timeout)
            return True
        except (RuntimeError, MemoryError, OSError, TimeoutError):
            return False
    return _can_spawn


@pytest.fixture(scope="session")
def extra_threads_ok(threads_ok):
    """Convenience: True iff we can start >= 2 threads (common case)."""
    return threads_ok(2)


# --- default to serial inside smoothkit unless test opts in via @pytest.mark.parallel ---
@pytest.fixture(autouse=True)
def _serial_by_default(request, monkeypatch):
    """Force n_workers=1 in smoothkit internals unless test is marked @pytest.mark.parallel."""
    if request.node.get_closest_marker("parallel"):
        return  # allow the test to exercise true parallel behavior

    orig = conc.parallel_execute
    allowed = set(inspect.signature(orig).parameters.keys())

    def _wrapped(*args, **kwargs):
        # ensure n_workers=1 regardless of call style
        kwargs["n_workers"] = 1
        kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        return orig(*args, **kwargs)

    monkeypatch.setattr(conc, "parallel_execute", _wrapped, raising=True)


@pytest.fixture
def seasonal_series():
    """Monthly-like series: unit sinusoid of period 12, linear trend and small noise."""
    rng = np.random.default_rng(42)
    t = np.arange(240, dtype=float)
    seasonal = np.sin(2.0 * np.pi * t / 12.0)
    trend = 0.05 * t
    return t, seasonal, trend, seasonal + trend + rng.normal(scale=0.1, size=t.size)
