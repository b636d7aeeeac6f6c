from __future__ import annotations

import json
import re
from collections.abc import Mapping

from feature_kernel.kernel.errors import InterpolationError

_PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


def placeholders(text: str) -> list[str]:
    # Store keys referenced by text, in order of appearance.
    return [match.group(1) for match in _PLACEHOLDER.finditer(text)]


def interpolate(text: str, store: Mapping[str, object]) -> str:
    """Replace every ``{{key}}`` in text with the current Store value.

    Strings are substituted verbatim; any other value is rendered as compact
    JSON so numbers, booleans and structures splice into JSON arguments.
    Text without placeholders is returned unchanged.

    Raises:
        InterpolationError: a referenced key is absent from the store.
    """

    def replacer(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in store:
            raise InterpolationError(key, text)
        return stringify(store[key])

    return _PLACEHOLDER.sub(replacer, text)


def stringify(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
