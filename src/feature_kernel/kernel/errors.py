from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from feature_kernel.kernel.model import Step


class StepError(Exception):
    # Base for every failure captured into StepResult.error.
    pass


class StepRunnerNotDefinedError(StepError):
    # No registered runner matched; carries the step so reporters can show both texts.
    def __init__(self, step: Step) -> None:
        super().__init__(f"No step runner defined for: {step.display_text}")
        self.step = step


class InterpolationError(StepError, KeyError):
    def __init__(self, key: str, text: str) -> None:
        super().__init__(f"Store has no value for '{key}' referenced in: {text}")
        self.key = key
        self.text = text

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class AssertionFailure(StepError, AssertionError):
    # Structured correctness failure; expected/actual are kept for reporting.
    def __init__(self, message: str, *, expected: object = None, actual: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.expected = expected
        self.actual = actual


class HandlerError(StepError):
    # Any other exception raised by a step handler.
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause
        self.__cause__ = cause


class RunLoadError(Exception):
    # Feature loading failed before any scenario executed.
    pass


def as_step_error(exc: Exception) -> StepError:
    # Normalise handler exceptions at the step boundary.
    if isinstance(exc, StepError):
        return exc
    if isinstance(exc, AssertionError):
        failure = AssertionFailure(
            str(exc) or "assertion failed",
            expected=getattr(exc, "expected", None),
            actual=getattr(exc, "actual", None),
        )
        failure.__cause__ = exc
        return failure
    return HandlerError(exc)
