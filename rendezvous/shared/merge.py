import copy
from typing import Any


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge `source` into `target` in place and return `target`.

    Nested dicts are merged key by key; any other value (lists included)
    replaces the target's value with a deep copy, so the caller's input is
    never aliased. A None value never wipes out a nested section.
    """
    for key, value in source.items():
        if value is None and isinstance(target.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target
