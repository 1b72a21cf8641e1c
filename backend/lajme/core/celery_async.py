"""
Utilities for sharing a single asyncio event loop inside Celery workers.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Awaitable, TypeVar

import nest_asyncio
from loguru import logger

T = TypeVar("T")

_loop_lock = threading.Lock()
_worker_loop: asyncio.AbstractEventLoop | None = None


def get_or_create_loop() -> asyncio.AbstractEventLoop:
    """
    Return a reusable asyncio loop for the current Celery worker process.

    Pooled database connections are bound to the loop that opened them, so
    every task in the process must run on the same one.
    """
    global _worker_loop
    loop = _worker_loop

    if loop is None or loop.is_closed():
        with _loop_lock:
            loop = _worker_loop
            if loop is None or loop.is_closed():
                loop = asyncio.new_event_loop()
                nest_asyncio.apply(loop)
                _worker_loop = loop
                logger.debug("Created new event loop for Celery worker")

    asyncio.set_event_loop(loop)
    return loop


def reset_loop() -> None:
    """Drop the shared loop so the next task starts on a fresh one."""
    global _worker_loop
    with _loop_lock:
        loop = _worker_loop
        _worker_loop = None
    if loop is not None and not loop.is_closed() and not loop.is_running():
        loop.close()


def run_async_task(coro: Awaitable[T]) -> T:
    """
    Execute an async coroutine inside the shared Celery event loop.
    """
    if not asyncio.iscoroutine(coro):
        raise TypeError("run_async_task expects an awaitable/coroutine object")

    loop = get_or_create_loop()
    try:
        return loop.run_until_complete(coro)
    except RuntimeError as e:
        if "different loop" in str(e):
            logger.warning(f"Event loop conflict detected, resetting worker loop: {e}")
            reset_loop()
        raise
