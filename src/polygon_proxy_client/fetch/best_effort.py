"""Best-effort parallel fetch.

Runs a set of independent async operations concurrently and collects one
outcome per operation. A failing operation becomes :data:`UNAVAILABLE` in
the result; the aggregate call itself never raises because of it.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Hashable, Iterable, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class FetchTask(Generic[T]):
    """A logical name bound to a zero-argument async operation."""

    name: str
    operation: Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class Available(Generic[T]):
    value: T


@dataclass(frozen=True)
class Unavailable:
    """Marker for an operation that failed; the reason is discarded."""


UNAVAILABLE = Unavailable()

FetchOutcome = Union[Available[Any], Unavailable]


@dataclass(frozen=True)
class AggregateResult:
    """Outcomes keyed by task name, plus the query key the tasks shared."""

    key: Hashable
    outcomes: dict[str, FetchOutcome] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __contains__(self, name: object) -> bool:
        return name in self.outcomes

    def __getitem__(self, name: str) -> FetchOutcome:
        return self.outcomes[name]

    def value(self, name: str, default: Any = None) -> Any:
        """Return the value for *name*, or *default* when it is unavailable."""
        outcome = self.outcomes[name]
        if isinstance(outcome, Available):
            return outcome.value
        return default

    def available_names(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if isinstance(o, Available)]

    def unavailable_names(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if isinstance(o, Unavailable)]

    def to_dict(self) -> dict[str, Any]:
        """Flatten to ``name -> value``, with ``None`` for unavailable slots."""
        return {name: self.value(name) for name in self.outcomes}


async def _settle(task: FetchTask) -> FetchOutcome:
    try:
        return Available(await task.operation())
    except Exception:
        return UNAVAILABLE


async def best_effort_fetch(key: Hashable, tasks: Iterable[FetchTask]) -> AggregateResult:
    """Run every task concurrently and wait for all of them to settle.

    Every operation is started before any is awaited to completion. There is
    no timeout and no retry; wrap an operation in ``asyncio.wait_for`` to
    bound it. If every operation fails the result holds only
    :data:`UNAVAILABLE` slots.

    Raises
    ------
    ValueError
        If two tasks share a name. Nothing is started in that case.
    """
    tasks = list(tasks)
    names = [t.name for t in tasks]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate fetch task names: {duplicates}")

    outcomes = await asyncio.gather(*(_settle(t) for t in tasks))
    return AggregateResult(key=key, outcomes=dict(zip(names, outcomes)))
