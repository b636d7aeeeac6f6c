from __future__ import annotations

from collections.abc import Iterator, MutableMapping


class Store(MutableMapping[str, object]):
    # Run-scoped shared state; one instance per run, never reset between tries or scenarios.
    def __init__(self, initial: dict[str, object] | None = None) -> None:
        self._values: dict[str, object] = dict(initial or {})

    def __getitem__(self, key: str) -> object:
        return self._values[key]

    def __setitem__(self, key: str, value: object) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Store({self._values!r})"

    def snapshot(self) -> dict[str, object]:
        # Shallow copy for diagnostics; later writes do not show up in it.
        return dict(self._values)
