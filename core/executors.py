"""Shared thread executor for CPU-bound operations.

This module provides centralized executor management for offloading
CPU-intensive tasks (MFCC extraction) from the async event loop.

Usage:
    from core.executors import run_cpu_bound

    result = await run_cpu_bound(heavy_function, arg1, arg2)
"""

from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, TypeVar, ParamSpec

logger = logging.getLogger(__name__)

# Type hints for generic functions
P = ParamSpec('P')
T = TypeVar('T')

# Upper bound for a single offloaded task
CPU_TASK_TIMEOUT_SECONDS = 30.0

# Global executor (lazy initialized)
_CPU_EXECUTOR: ThreadPoolExecutor | None = None


def _get_optimal_workers() -> int:
    """Calculate worker count from CPU cores."""
    cpu_count = os.cpu_count() or 2
    return min(8, max(2, cpu_count))


def get_cpu_executor() -> ThreadPoolExecutor:
    """Get or create shared CPU-bound executor."""
    global _CPU_EXECUTOR
    if _CPU_EXECUTOR is None:
        max_workers = _get_optimal_workers()
        _CPU_EXECUTOR = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="cpu_bound_"
        )
        logger.info(f"Created CPU executor with {max_workers} workers")
    return _CPU_EXECUTOR


async def run_cpu_bound(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a CPU-bound function in the thread pool executor.

    Args:
        func: The CPU-bound function to run
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        The function's return value
    """
    loop = asyncio.get_running_loop()
    executor = get_cpu_executor()

    if kwargs:
        future = loop.run_in_executor(executor, partial(func, *args, **kwargs))
    else:
        future = loop.run_in_executor(executor, func, *args)

    try:
        return await asyncio.wait_for(future, timeout=CPU_TASK_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"CPU-bound task {getattr(func, '__name__', func)} timed out after {CPU_TASK_TIMEOUT_SECONDS:.0f}s")
        raise


def shutdown_executors() -> None:
    """Shutdown the executor gracefully during application shutdown."""
    global _CPU_EXECUTOR

    if _CPU_EXECUTOR is not None:
        logger.info("Shutting down CPU executor...")
        _CPU_EXECUTOR.shutdown(wait=True, cancel_futures=False)

    _CPU_EXECUTOR = None
