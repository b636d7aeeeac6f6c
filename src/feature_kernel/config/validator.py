from __future__ import annotations

import re


class ConfigError(ValueError):
    # Raised for invalid configuration (fail fast).
    pass


_MODULE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def validate_step_pack_names(names: list[str]) -> list[str]:
    # Step packs are importable module paths; duplicates would register runners twice.
    seen: set[str] = set()
    for name in names:
        if not isinstance(name, str) or not _MODULE_NAME.match(name):
            raise ConfigError(f"step_packs entries must be dotted module names: {name!r}")
        if name in seen:
            raise ConfigError(f"step_packs contains duplicate module: {name}")
        seen.add(name)
    return names
