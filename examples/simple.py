from __future__ import annotations

import asyncio
import logging

from requestors import Outcome, chained, constant, functional_callback, record, repeat, unary

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def add(a: int):
    return lambda b: a + b


def report(label: str):
    return functional_callback(lambda reason: print(f"{label}: failed - {reason}"))(
        lambda value: print(f"{label}: {value}")
    )


def run_synchronous() -> None:
    # 0 -> 1 -> 2 -> 3
    repeat(lambda x: x < 3)(unary(lambda x: x + 1)).run(report("repeat"), 0)

    # 0 -> 3 -> 6 -> 9 -> 12
    chained(continuer=lambda acc: acc < 10, aggregator=add)(constant(3)).run(report("chained"), 0)

    profile = record()({
        "name": unary(str.title),
        "age": unary(int),
    })
    profile.run(report("record"), {"name": "ada lovelace", "age": "36"})
    profile.run(report("record (missing age)"), {"name": "grace hopper"})
    profile.run(report("record (bad age)"), {"name": "alan", "age": "n/a"})


async def run_awaited() -> Outcome:
    return await repeat(lambda x: x < 100)(unary(lambda x: x * 2)).outcome(1)


if __name__ == "__main__":
    run_synchronous()
    print("awaited:", asyncio.run(run_awaited()))
