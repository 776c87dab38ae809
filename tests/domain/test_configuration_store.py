from __future__ import annotations

import ast

import pytest

from settingsstore.domain.configuration_store import ConfigurationStore
from settingsstore.domain.exceptions import (
    ConfigurationError,
    PropertyKindError,
    UnencodableTextError,
)


def test_set_then_get_returns_value() -> None:
    store = ConfigurationStore()
    store.set("sitename", "My Site")
    assert store.get("sitename") == "My Site"


def test_set_grouped_value_is_not_visible_ungrouped() -> None:
    store = ConfigurationStore()
    store.set("timezone", "+10:00", "region")

    assert store.get("timezone", "region") == "+10:00"
    assert store.get("timezone") is None


def test_set_overwrites_and_keeps_first_insertion_order() -> None:
    store = ConfigurationStore()
    store.set("a", "1", "g")
    store.set("b", "2", "g")
    store.set("a", "3", "g")

    assert list(store.get("g")) == ["a", "b"]
    assert store.get("a", "g") == "3"


def test_set_with_empty_group_falls_back_to_ungrouped() -> None:
    store = ConfigurationStore()
    store.set("debug", "1", "")
    assert store.get() == {"debug": "1"}


def test_set_unescapes_value() -> None:
    store = ConfigurationStore()
    store.set("path", "C:\\\\dir")
    store.set("quote", "It\\'s", "general")

    assert store.get("path") == "C:\\dir"
    assert store.get("quote", "general") == "It's"


def test_get_missing_returns_none() -> None:
    store = ConfigurationStore()
    store.set("debug", "1")

    assert store.get("missing") is None
    assert store.get("missing", "nogroup") is None
    # a leaf is not a group
    assert store.get("anything", "debug") is None


def test_get_without_arguments_returns_live_properties() -> None:
    store = ConfigurationStore()
    store.set("debug", "1")

    props = store.get()
    store.set("other", "2")

    assert props is store.get()
    assert props == {"debug": "1", "other": "2"}


def test_remove_ungrouped_entry() -> None:
    store = ConfigurationStore()
    store.set("debug", "1")
    store.remove("debug")
    assert store.get("debug") is None


def test_remove_grouped_entry_keeps_siblings_and_group() -> None:
    store = ConfigurationStore()
    store.set("a", "1", "g")
    store.set("b", "2", "g")

    store.remove("a", "g")

    assert store.get("a", "g") is None
    assert store.get("b", "g") == "2"

    store.remove("b", "g")
    assert store.get() == {"g": {}}


def test_remove_empty_string_value_uses_existence_check() -> None:
    store = ConfigurationStore()
    store.set("flag", "")

    store.remove("flag")

    assert "flag" not in store
    assert store.get() == {}


def test_remove_group_by_name() -> None:
    store = ConfigurationStore()
    store.set("timezone", "+10:00", "region")
    store.remove("region")
    assert store.get() == {}


def test_remove_missing_is_noop() -> None:
    store = ConfigurationStore()
    store.set("a", "1", "g")

    store.remove("nope")
    store.remove("nope", "g")
    store.remove("a", "other")

    assert store.get() == {"g": {"a": "1"}}


def test_remove_with_unknown_group_falls_back_to_top_level_name() -> None:
    store = ConfigurationStore()
    store.set("debug", "1")

    store.remove("debug", "missing")

    assert store.get("debug") is None


def test_flush_empties_store_and_keeps_case_policy() -> None:
    store = ConfigurationStore(force_lower_case=True)
    store.set("A", "1", "G")

    store.flush()

    assert store.get() == {}
    store.set("B", "2")
    assert store.get() == {"b": "2"}


def test_force_lower_case_normalizes_all_keys() -> None:
    store = ConfigurationStore(force_lower_case=True)
    store.set("Foo", "x")
    store.set("TimeZone", "+10:00", "Region")

    assert store.get("foo") == "x"
    assert store.get("Foo") == "x"
    assert store.get("TIMEZONE", "REGION") == "+10:00"
    assert store.get() == {"foo": "x", "region": {"timezone": "+10:00"}}

    store.remove("FOO")
    assert store.get("foo") is None


def test_case_sensitive_by_default() -> None:
    store = ConfigurationStore()
    store.set("Foo", "x")
    assert store.get("foo") is None
    assert store.force_lower_case is False


def test_set_array_sets_grouped_values() -> None:
    store = ConfigurationStore()
    store.set_array({"region": {"timezone": "+10:00"}})
    assert store.get("timezone", "region") == "+10:00"


def test_set_array_replaces_group_wholesale() -> None:
    store = ConfigurationStore()
    store.set("a", "1", "g")
    store.set("b", "2", "g")

    store.set_array({"g": {"c": "3"}})

    assert store.get("g") == {"c": "3"}
    assert store.get("a", "g") is None


def test_set_array_keeps_existing_positions_and_appends_new_keys() -> None:
    store = ConfigurationStore()
    store.set("x", "1")
    store.set("y", "1", "g")

    store.set_array({"x": "2", "z": "3"})

    assert list(store.get()) == ["x", "g", "z"]
    assert store.get("x") == "2"


def test_set_array_unescapes_recursively_and_copies_input() -> None:
    entries = {"g": {"q": "It\\'s"}, "p": "a\\\\b"}
    store = ConfigurationStore()

    store.set_array(entries)
    entries["g"]["q"] = "changed"

    assert store.get("q", "g") == "It's"
    assert store.get("p") == "a\\b"


def test_set_array_lowercases_keys_under_policy() -> None:
    store = ConfigurationStore(force_lower_case=True)
    store.set_array({"Region": {"TimeZone": "+10:00"}, "Debug": "1"})
    assert store.get() == {"region": {"timezone": "+10:00"}, "debug": "1"}


def test_mixing_group_and_leaf_is_rejected() -> None:
    store = ConfigurationStore()
    store.set("debug", "1")
    store.set("timezone", "+10:00", "region")

    with pytest.raises(PropertyKindError):
        store.set("x", "y", "debug")
    with pytest.raises(PropertyKindError):
        store.set("region", "flat")
    with pytest.raises(PropertyKindError):
        store.set_array({"region": "flat"})
    with pytest.raises(PropertyKindError):
        store.set_array({"g": {"nested": {"too": "deep"}}})

    assert store.get() == {"debug": "1", "region": {"timezone": "+10:00"}}


def test_property_kind_error_is_configuration_error() -> None:
    assert issubclass(PropertyKindError, ConfigurationError)


def test_scenario_serialize_is_read_back_by_literal_eval() -> None:
    store = ConfigurationStore()
    store.set("sitename", "My Site", "general")
    store.set("debug", "1")

    expected = {"general": {"sitename": "My Site"}, "debug": "1"}
    assert store.get() == expected
    assert ast.literal_eval(store.serialize()) == expected


def test_serialize_matches_persisted_layout() -> None:
    store = ConfigurationStore()
    store.set("sitename", "My Site", "general")
    store.set("empty-key", "", "general")

    assert store.serialize() == (
        "{\r\n"
        "\r\n"
        "\r\n"
        "\t\t###### GENERAL ######\r\n"
        "\t\t'general': {\r\n"
        "\t\t\t'sitename': 'My Site',\r\n"
        "\t\t\t'empty-key': None,\r\n"
        "\t\t},\r\n"
        "\t\t########\r\n"
        "\t}"
    )
    assert store.to_text() == store.serialize()


def test_serialize_empty_store() -> None:
    store = ConfigurationStore()
    assert ast.literal_eval(store.serialize()) == {}


def test_serialize_keeps_group_order() -> None:
    store = ConfigurationStore()
    store.set("b", "1", "zeta")
    store.set("a", "1", "alpha")

    text = store.serialize()
    assert text.index("###### ZETA ######") < text.index("###### ALPHA ######")


def test_load_text_restores_serialized_store() -> None:
    store = ConfigurationStore()
    store.set("path", "C:\\\\new", "general")
    store.set("quote", "It\\'s", "general")
    store.set("blank", "", "general")
    store.set("debug", "1")

    restored = ConfigurationStore()
    restored.load_text(store.serialize())

    assert restored.get() == store.get()
    assert restored.get("path", "general") == "C:\\new"


def test_len_contains_and_repr() -> None:
    store = ConfigurationStore(force_lower_case=True)
    store.set("A", "1")
    store.set("b", "2", "g")

    assert len(store) == 2
    assert "a" in store
    assert "A" in store
    assert 1 not in store
    assert "entries=2" in repr(store)


def test_force_lower_case_remove_grouped_entry() -> None:
    store = ConfigurationStore(force_lower_case=True)
    store.set("TimeZone", "+10:00", "Region")
    store.set("Dst", "no", "Region")

    store.remove("TIMEZONE", "REGION")

    assert store.get("timezone", "region") is None
    assert store.get("dst", "region") == "no"
    assert store.get() == {"region": {"dst": "no"}}


def test_none_name_is_stored_as_empty_key() -> None:
    store = ConfigurationStore()
    store.set(None, "v")

    assert store.get() == {"": "v"}

    restored = ConfigurationStore()
    restored.load_text(store.serialize())
    assert restored.get() == {"": "v"}


@pytest.mark.parametrize(
    "write",
    [
        lambda s: s.set("k", "\ud800"),
        lambda s: s.set("\ud800", "v"),
        lambda s: s.set("k", "v", "\udfff"),
        lambda s: s.set_array({"g": {"k": "bad\ud800"}}),
        lambda s: s.set_array({"k\ud800": "v"}),
    ],
)
def test_unencodable_text_is_rejected_before_storing(write) -> None:
    store = ConfigurationStore()
    store.set("debug", "1")

    with pytest.raises(UnencodableTextError):
        write(store)

    assert store.get() == {"debug": "1"}
    restored = ConfigurationStore()
    restored.load_text(store.serialize())
    assert restored.get() == {"debug": "1"}


def test_unencodable_text_error_is_configuration_error() -> None:
    assert issubclass(UnencodableTextError, ConfigurationError)
