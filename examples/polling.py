#!/usr/bin/env python3
"""Polling example on a real event loop.

A background coroutine marks a job as finished after a short delay;
`wait` polls for it, and a second `wait` gives up on a job that never
finishes. `promise` and `applied_parallel` fetch several items at once.
"""

from __future__ import annotations

import asyncio
import logging

from requestors import Task, applied_parallel, promise, wait
from requestors.kernel.task import Callback, Cancel

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

jobs: dict[str, bool] = {"build": False, "deploy": False}


async def finish_later(name: str, delay: float) -> None:
    await asyncio.sleep(delay)
    jobs[name] = True


async def fetch(item: str) -> str:
    await asyncio.sleep(0.05)
    return item.upper()


def fetch_task() -> Task:
    """One coroutine per input item."""

    def _run(callback: Callback, item: str) -> Cancel:
        return promise(lambda: fetch(item)).run(callback)

    return Task(_run)


async def main() -> None:
    finisher = asyncio.create_task(finish_later("build", 0.2))

    built = await wait(
        predicate=lambda name: jobs[name],
        args="build",
        interval=0.05,
        timeout=1.0,
        value=lambda: "build finished",
    ).outcome()
    print("build:", built)

    deployed = await wait(
        predicate=lambda: jobs["deploy"],
        interval=0.05,
        timeout=0.3,
    ).outcome()
    print("deploy:", deployed)

    fetched = await applied_parallel()(fetch_task()).outcome(["a", "b", "c"])
    print("fetched:", fetched)
    await finisher


if __name__ == "__main__":
    asyncio.run(main())
