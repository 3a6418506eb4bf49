"""Deep merge for plain nested dicts."""

from __future__ import annotations

from typing import Any


def is_plain_object(value: Any) -> bool:
    """True for exact ``dict`` instances.

    Lists, datetimes, dict subclasses and other class instances are not
    plain objects and are never merged into.
    """
    return type(value) is dict


def deep_merge(target: Any, *sources: Any) -> dict[str, Any]:
    """Deep-merge *sources* into a copy of *target*.

    - Nested plain dicts are merged recursively.
    - Lists are replaced, not concatenated.
    - ``None`` source values overwrite the target value.
    - Non-plain values are assigned by reference.

    *target* is never mutated; a new dict is returned.  Non-dict sources are
    skipped.
    """
    result: dict[str, Any] = dict(target) if is_plain_object(target) else {}

    for source in sources:
        if not is_plain_object(source):
            continue
        for key, src_val in source.items():
            tgt_val = result.get(key)
            if is_plain_object(src_val) and is_plain_object(tgt_val):
                result[key] = deep_merge(tgt_val, src_val)
            else:
                result[key] = src_val

    return result
