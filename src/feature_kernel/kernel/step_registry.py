from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

from feature_kernel.kernel.context import RunnerContext
from feature_kernel.kernel.errors import StepRunnerNotDefinedError
from feature_kernel.kernel.model import Step

MatchGroups: TypeAlias = tuple[str | None, ...]

# A matcher answers "will this runner take the step?". Capture groups (possibly empty)
# or True mean a match; None or False mean no match. An empty tuple is still a match.
Matcher: TypeAlias = Callable[[str], MatchGroups | bool | None]

# Handlers may be coroutines or plain functions; the runner awaits awaitables.
StepHandler: TypeAlias = Callable[[MatchGroups, Step, RunnerContext], Awaitable[object] | object]


def regex_matcher(pattern: str | re.Pattern[str]) -> Matcher:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def will_run(text: str) -> MatchGroups | None:
        match = compiled.search(text)
        return match.groups() if match is not None else None

    will_run.__name__ = f"regex_matcher({compiled.pattern!r})"
    return will_run


@dataclass(frozen=True, slots=True)
class StepRunner:
    # Pairs a matcher with the handler executed for steps it recognises.
    will_run: Matcher
    run: StepHandler
    name: str = ""


@dataclass
class StepPack:
    """Ordered builder for a group of step runners.

    Runners are kept in declaration order, which is the order the registry
    tries them in::

        pack = StepPack()

        @pack.step(r'^the endpoint is "([^"]+)"$')
        async def set_endpoint(groups, step, ctx):
            ctx.session.endpoint = groups[0]
    """

    runners: list[StepRunner] = field(default_factory=list)

    def step(self, pattern: str | re.Pattern[str]) -> Callable[[StepHandler], StepHandler]:
        def decorator(handler: StepHandler) -> StepHandler:
            self.add(pattern, handler)
            return handler

        return decorator

    def add(self, pattern: str | re.Pattern[str], handler: StepHandler) -> StepRunner:
        runner = StepRunner(
            will_run=regex_matcher(pattern),
            run=handler,
            name=getattr(handler, "__name__", ""),
        )
        self.runners.append(runner)
        return runner

    def __iter__(self) -> Iterator[StepRunner]:
        return iter(self.runners)


@dataclass
class StepRegistry:
    # First match wins; registration order is part of the contract because packs overlap.
    _runners: list[StepRunner] = field(default_factory=list)

    def register(self, runner: StepRunner) -> None:
        self._runners.append(runner)

    def extend(self, runners: Iterable[StepRunner]) -> None:
        for runner in runners:
            self.register(runner)

    @property
    def runners(self) -> tuple[StepRunner, ...]:
        return tuple(self._runners)

    def find_runner(self, step: Step) -> tuple[StepRunner, MatchGroups]:
        text = step.display_text
        for runner in self._runners:
            groups = runner.will_run(text)
            if groups is None or groups is False:
                continue
            return runner, () if groups is True else tuple(groups)
        raise StepRunnerNotDefinedError(step)

    def __len__(self) -> int:
        return len(self._runners)
