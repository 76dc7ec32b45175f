"""Layer ordering and the layer comparisons the rule catalog is built from."""

from __future__ import annotations

from enum import IntEnum


class ModuleLayer(IntEnum):
    """Named layers; lower values are more foundational."""

    CORE = 0
    FOUNDATION = 1
    DOMAIN = 2
    FEATURE = 3
    APPLICATION = 4


def is_same_module(source: str, target: str) -> bool:
    return source == target


def depends_upward(source_layer: int, target_layer: int) -> bool:
    """Return True when the target sits on a less foundational layer."""
    return target_layer > source_layer


def is_peer(source: str, target: str, source_layer: int, target_layer: int) -> bool:
    """Return True for two different modules sharing one layer."""
    return source_layer == target_layer and not is_same_module(source, target)


def exceeds_ceiling(
    source_layer: int,
    target_layer: int,
    ceiling: int,
    *,
    allow_same_layer: bool,
) -> bool:
    """Check a target layer against the highest layer a source may reach.

    With ``allow_same_layer`` a target on the source's own layer is accepted
    even when that layer lies above the ceiling.
    """
    if target_layer <= ceiling:
        return False
    return not (allow_same_layer and target_layer == source_layer)


__all__ = [
    "ModuleLayer",
    "depends_upward",
    "exceeds_ceiling",
    "is_peer",
    "is_same_module",
]
