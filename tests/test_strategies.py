import pytest

from kru_core.errors import UnknownStrategyError
from kru_update.strategies import (
    available_strategies,
    blank,
    create_strategy,
    fill_byte,
    register_strategy,
    within_offsets,
)


def test_registry_names_and_aliases():
    assert available_strategies() == ["destroy", "destroykey", "destroyvalue", "emptyjson"]
    for name in ["destroy-key", "destroy-keys", "DestroyKey", " destroy_keys "]:
        assert create_strategy(name)(0, b"ab", b"cd") == (b"**", b"cd")


def test_unknown_strategy_is_configuration_error():
    with pytest.raises(UnknownStrategyError, match="Unknown updater"):
        create_strategy("com.example.MyUpdater")


def test_fill_must_be_single_byte():
    assert fill_byte("#") == b"#"
    assert fill_byte(b"x") == b"x"
    with pytest.raises(ValueError):
        fill_byte("ab")
    with pytest.raises(ValueError):
        fill_byte("é")


def test_blank_keeps_length():
    assert blank(b"hello", b"*") == b"*****"
    assert blank(b"", b"*") is None


def test_destroy_variants():
    assert create_strategy("destroy-value", fill="-")(0, b"k", b"val") == (b"k", b"---")
    assert create_strategy("destroy-value")(0, b"k", b"") is None
    assert create_strategy("destroy")(0, b"", b"val") == (b"", b"***")
    assert create_strategy("destroy")(0, b"", b"") is None


def test_empty_json_value():
    update = create_strategy("empty-json")
    assert update(0, b"k", b'{"a":1}') == (b"k", b"{     }")
    assert update(0, b"k", b"xy") == (b"k", b"{}")
    assert update(0, b"k", b"x") is None


def test_within_offsets_is_inclusive():
    update = within_offsets(create_strategy("destroy-value"), 10, 12)
    assert update(9, b"", b"v") is None
    assert update(10, b"", b"v") == (b"", b"*")
    assert update(12, b"", b"v") == (b"", b"*")
    assert update(13, b"", b"v") is None

    open_ended = within_offsets(create_strategy("destroy-value"), offset_min=5)
    assert open_ended(4, b"", b"v") is None
    assert open_ended(10**12, b"", b"v") == (b"", b"*")


def test_within_offsets_rejects_inverted_window():
    with pytest.raises(ValueError):
        within_offsets(create_strategy("destroy"), 5, 4)


def test_register_custom_strategy():
    def upper_factory(fill):
        return lambda offset, key, value: (key, value.upper())

    register_strategy("upper-value", upper_factory)
    try:
        assert create_strategy("UpperValue")(0, b"k", b"abc") == (b"k", b"ABC")
    finally:
        from kru_update import strategies

        strategies._REGISTRY.pop("uppervalue")
        strategies._CANONICAL.pop("uppervalue")
