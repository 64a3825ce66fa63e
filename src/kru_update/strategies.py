"""Update strategies and the name registry the CLI resolves them from.

A strategy is a plain function ``(offset, key, value) -> (new_key, new_value) | None``.
Returning None leaves the record alone. Replacements must keep the exact
lengths of the input; the patcher refuses anything else.
"""
from __future__ import annotations

from typing import Callable, Optional

from kru_core.errors import UnknownStrategyError
from kru_core.protocol import DEFAULT_BLANK_CHAR

UpdateStrategy = Callable[[int, bytes, bytes], Optional[tuple[bytes, bytes]]]
StrategyFactory = Callable[[bytes], UpdateStrategy]


def fill_byte(fill: str | bytes) -> bytes:
    """Validate a fill character; it must encode to exactly one byte."""
    b = fill.encode("utf-8") if isinstance(fill, str) else bytes(fill)
    if len(b) != 1:
        raise ValueError(f"Fill character must be a single byte, got {fill!r}")
    return b


def blank(data: bytes, fill: bytes) -> bytes | None:
    """Same-length run of ``fill``, or None when there is nothing to blank."""
    if not data:
        return None
    return fill * len(data)


def destroy_key(fill: bytes) -> UpdateStrategy:
    def update(offset: int, key: bytes, value: bytes):
        new_key = blank(key, fill)
        return None if new_key is None else (new_key, value)

    return update


def destroy_value(fill: bytes) -> UpdateStrategy:
    def update(offset: int, key: bytes, value: bytes):
        new_value = blank(value, fill)
        return None if new_value is None else (key, new_value)

    return update


def destroy(fill: bytes) -> UpdateStrategy:
    def update(offset: int, key: bytes, value: bytes):
        new_key = blank(key, fill)
        new_value = blank(value, fill)
        if new_key is None and new_value is None:
            return None
        return (new_key or key, new_value or value)

    return update


def empty_json_value(fill: bytes) -> UpdateStrategy:
    # Values of length < 2 cannot hold "{}" and are left alone.
    def update(offset: int, key: bytes, value: bytes):
        if len(value) < 2:
            return None
        return (key, b"{" + b" " * (len(value) - 2) + b"}")

    return update


def within_offsets(
    strategy: UpdateStrategy,
    offset_min: int | None = None,
    offset_max: int | None = None,
) -> UpdateStrategy:
    """Restrict ``strategy`` to records whose offset lies in [offset_min, offset_max]."""
    if offset_min is None and offset_max is None:
        return strategy
    if offset_min is not None and offset_max is not None and offset_min > offset_max:
        raise ValueError(f"offset_min {offset_min} is greater than offset_max {offset_max}")

    def update(offset: int, key: bytes, value: bytes):
        if offset_min is not None and offset < offset_min:
            return None
        if offset_max is not None and offset > offset_max:
            return None
        return strategy(offset, key, value)

    return update


# --- registry ---

_REGISTRY: dict[str, StrategyFactory] = {}
_CANONICAL: dict[str, str] = {}


def normalize_name(name: str) -> str:
    return name.strip().replace("-", "").replace("_", "").lower()


def register_strategy(name: str, factory: StrategyFactory, *aliases: str) -> None:
    canonical = normalize_name(name)
    for n in (name, *aliases):
        _REGISTRY[normalize_name(n)] = factory
        _CANONICAL[normalize_name(n)] = canonical


def available_strategies() -> list[str]:
    return sorted(set(_CANONICAL.values()))


def create_strategy(name: str, fill: str | bytes = DEFAULT_BLANK_CHAR) -> UpdateStrategy:
    factory = _REGISTRY.get(normalize_name(name))
    if factory is None:
        raise UnknownStrategyError(
            f"Unknown updater {name!r}. Available: {', '.join(available_strategies())}"
        )
    return factory(fill_byte(fill))


register_strategy("empty-json", empty_json_value)
register_strategy("destroy-key", destroy_key, "destroy-keys")
register_strategy("destroy-value", destroy_value, "destroy-values")
register_strategy("destroy", destroy)
