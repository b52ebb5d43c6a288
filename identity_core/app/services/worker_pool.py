"""
Dedicated thread pool for CPU-bound credential work (bcrypt hash and verify).

Use cases await run_cpu_bound; bcrypt never runs on the event loop thread.
"""

import asyncio
import functools
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

_executor: Optional[ThreadPoolExecutor] = None


def get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=min(4, os.cpu_count() or 1),
            thread_name_prefix="credential-hash",
        )
    return _executor


async def run_cpu_bound(func: Callable[..., T], *args, **kwargs) -> T:
    """Run func on the credential pool; exceptions propagate to the caller"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        get_executor(), functools.partial(func, *args, **kwargs)
    )


def shutdown_executor() -> None:
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=True)
        _executor = None
