from __future__ import annotations

import pytest

from feature_kernel.kernel.errors import InterpolationError
from feature_kernel.kernel.interpolation import interpolate, placeholders
from feature_kernel.kernel.model import Step
from feature_kernel.kernel.store import Store


def test_interpolates_store_value() -> None:
    assert interpolate("/items/{{id}}", Store({"id": "abc123"})) == "/items/abc123"


def test_text_without_placeholders_is_identity() -> None:
    text = 'the response should equal {"a": {"b": 1}}'
    assert interpolate(text, Store()) == text


def test_whitespace_inside_braces_is_ignored() -> None:
    assert interpolate("{{ id }}-{{id}}", {"id": "x"}) == "x-x"


def test_non_string_values_render_as_json() -> None:
    store = Store({"n": 5, "ok": True, "obj": {"a": [1, 2]}, "none": None})
    assert interpolate("{{n}} {{ok}} {{obj}} {{none}}", store) == '5 true {"a":[1,2]} null'


def test_missing_key_raises() -> None:
    with pytest.raises(InterpolationError) as info:
        interpolate("/items/{{id}}", Store())
    assert info.value.key == "id"
    assert info.value.text == "/items/{{id}}"
    assert "id" in str(info.value)


def test_placeholders_in_order() -> None:
    assert placeholders("{{b}} and {{ a }} then {{b}}") == ["b", "a", "b"]


def test_step_interpolation_returns_new_step_and_sees_current_store() -> None:
    # Reinterpolating after a store write picks up the new value; the raw step never changes.
    store = Store({"id": "1"})
    step = Step(text="get {{id}}", argument='{"id": "{{id}}"}')
    first = step.interpolate(store)
    store["id"] = "2"
    second = step.interpolate(store)

    assert first.interpolated_text == "get 1"
    assert second.interpolated_text == "get 2"
    assert second.interpolated_argument == '{"id": "2"}'
    assert step.interpolated_text is None
    assert step.text == "get {{id}}"


def test_step_without_argument_keeps_none() -> None:
    step = Step(text="plain").interpolate(Store())
    assert step.interpolated_text == "plain"
    assert step.interpolated_argument is None
