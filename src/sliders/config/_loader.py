# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Raw configuration sources: the TOML file and ``SLIDERS_*`` variables.

Each source produces a plain nested dict keyed by config section. ``Config``
layers them with :func:`deep_merge` before validation.
"""

import copy
import json
import os
import tomllib
from typing import TYPE_CHECKING, Any

from sliders.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_PREFIX = "SLIDERS_"
_SECTION_SEPARATOR = "__"
# Leading characters of values decoded as JSON numbers, arrays or objects.
_JSON_STARTS = frozenset("-0123456789[{")


def read_toml_file(path: "Path") -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read a sliders TOML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file {path}: {e}"
        raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e


def deep_merge(
    base: "Mapping[str, Any]",  # pyright: ignore[reportExplicitAny]
    override: "Mapping[str, Any]",  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Return ``base`` with ``override`` layered on top.

    Sections present on both sides merge key by key; any other value in
    ``override`` (lists included) replaces the one in ``base``. The inputs
    are never mutated.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: "Mapping[str, str] | None" = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect ``SLIDERS_*`` variables as a nested config dict.

    ``SLIDERS_SUPERVISOR__MAX_CHILDREN=9`` becomes
    ``{"supervisor": {"max_children": 9}}``.
    """
    overrides: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    source = os.environ if environ is None else environ

    for name, raw in source.items():
        if not name.startswith(prefix) or name == prefix:
            continue
        *sections, leaf = name.removeprefix(prefix).lower().split(_SECTION_SEPARATOR)
        target = overrides
        for section in sections:
            child = target.get(section)
            if not isinstance(child, dict):
                child = target[section] = {}
            target = child
        target[leaf] = parse_env_value(raw)

    return overrides


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Convert an environment string to the closest config type.

    ``true``/``false`` in any case become booleans. Numbers, arrays and
    objects are decoded as JSON. Anything else, including values that only
    look like JSON, stays a string.
    """
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if value[:1] in _JSON_STARTS:
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value
