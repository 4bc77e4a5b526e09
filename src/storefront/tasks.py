"""Fire-and-forget background work on the running event loop.

Used for promo revalidation and catalog analytics, whose outcome must never
block or fail the local mutation that triggered them. Strong references to
in-flight tasks are kept until they finish; failures are logged.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_pending: set[asyncio.Task] = set()


def _on_done(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("background_task_failed", task=task.get_name(), error=repr(exc))


def spawn(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task | None:
    """Schedule ``coro`` on the running loop and return its task.

    Without a running loop the coroutine is closed unstarted and None is
    returned; callers must treat the work as not having happened.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        coro.close()
        logger.debug("background_task_dropped", task=name, reason="no running event loop")
        return None

    task = loop.create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_on_done)
    return task


async def drain() -> None:
    """Wait until every background task on the current loop has finished."""
    loop = asyncio.get_running_loop()
    while True:
        tasks = [t for t in _pending if t.get_loop() is loop and not t.done()]
        if not tasks:
            return
        await asyncio.gather(*tasks, return_exceptions=True)
