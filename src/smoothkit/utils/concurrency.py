"""Concurrency helpers for independent smoothing tasks."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Sequence, Tuple

__all__ = [
    "parallel_execute",
    "normalize_workers",
]


def parallel_execute(
    worker: Callable[..., Any],
    arg_tuples: Sequence[Tuple[Any, ...]],
    *,
    n_workers: int = 1,
) -> list[Any]:
    """Runs ``worker(*args)`` for each tuple in arg_tuples.

    Results are returned in the order of ``arg_tuples`` regardless of which
    thread finishes first.

    Args:
        worker: Callable applied to each argument tuple.
        arg_tuples: Positional arguments, one tuple per task.
        n_workers: Number of threads. ``1`` runs the tasks serially in the
            calling thread.

    Returns:
        List of ``worker`` results.
    """
    n_workers = normalize_workers(n_workers)
    if n_workers > 1 and len(arg_tuples) > 1:
        with ThreadPoolExecutor(max_workers=min(n_workers, len(arg_tuples))) as ex:
            futures = [ex.submit(worker, *args) for args in arg_tuples]
            return [f.result() for f in futures]
    return [worker(*args) for args in arg_tuples]


def normalize_workers(
    n_workers: Any
) -> int:
    """Ensures n_workers is a positive integer, defaulting to 1.

    Args:
        n_workers: Input number of workers (can be None, float, negative, etc.)

    Returns:
        int: A positive integer number of workers (at least 1).

    Raises:
        None: Invalid inputs are coerced to 1.
    """
    try:
        n = int(n_workers)
    except (TypeError, ValueError):
        n = 1
    return 1 if n < 1 else n
