from __future__ import annotations

from collections.abc import Container

from feature_kernel.kernel.errors import AssertionFailure

# Assertion helpers for step packs; failures carry expected/actual for reporters.


def expect_equal(actual: object, expected: object, message: str | None = None) -> None:
    if actual != expected:
        raise AssertionFailure(
            message or f"expected {expected!r}, got {actual!r}",
            expected=expected,
            actual=actual,
        )


def expect_in(member: object, container: Container[object], message: str | None = None) -> None:
    if member not in container:
        raise AssertionFailure(
            message or f"expected {member!r} to be present",
            expected=member,
            actual=container,
        )


def expect_true(value: object, message: str | None = None) -> None:
    if not value:
        raise AssertionFailure(message or f"expected a truthy value, got {value!r}", expected=True, actual=value)
