"""Tests for property omission helpers."""

from __future__ import annotations

import copy

import pytest

from logshape.serializers import (
    create_omit_properties_serializer,
    create_omitter,
    omit_properties,
)

OMIT_NAMES = ["omit-prop", "omit.prop", "", "0"]

BASE = {
    "keepProp": "Some value",
    "omit-prop": "omit with dash",
    "omit.prop": "omit with dot",
    "": "omit with empty key",
    "0": "omit number as text key",
    "omit": {"prop": "DO NOT omit"},
}


def test_omits_listed_top_level_keys():
    """Only exact top-level key matches are removed."""

    assert omit_properties(dict(BASE), OMIT_NAMES) == {
        "keepProp": "Some value",
        "omit": {"prop": "DO NOT omit"},
    }


@pytest.mark.parametrize("name", [None, 99])
def test_non_string_names_are_ignored(name):
    """Names that are not strings never match keys."""

    value = {"99": "kept", **BASE}

    assert omit_properties(value, [*OMIT_NAMES, name]) == {
        "99": "kept",
        "keepProp": "Some value",
        "omit": {"prop": "DO NOT omit"},
    }


def test_input_is_not_altered():
    """Omission returns a copy."""

    value = copy.deepcopy(BASE)

    omit_properties(value, OMIT_NAMES)

    assert value == BASE


@pytest.mark.parametrize(
    "value",
    [None, {}, "key1=value1,key2=value2", [{"key1": "value1"}, {"key2": "value2"}]],
)
def test_non_mappings_are_returned_unchanged(value):
    """Anything other than a mapping passes through."""

    assert omit_properties(value, OMIT_NAMES) == value


def test_omitter_without_names_is_identity():
    """An omitter with nothing to omit returns its input object."""

    value = {"a": 1}

    assert create_omitter([])(value) is value
    assert create_omitter([None, 1, True])(value) is value


@pytest.mark.parametrize("names", [None, [], [None, 1, True, False, {}, []]])
def test_serializer_table_is_empty_without_names(names):
    """No table entry is created when no usable names are given."""

    assert create_omit_properties_serializer("main", names) == {}


def test_serializer_table_requires_property_name():
    """A missing or empty top-level property name yields no entry."""

    assert create_omit_properties_serializer("", ["a"]) == {}
    assert create_omit_properties_serializer(None, ["a"]) == {}


def test_omits_properties_from_logged_object(logger_factory, stdout_mock):
    """The serializer entry omits keys beneath its property when logging."""

    serializer = create_omit_properties_serializer("main", ["remove-prop", "remove.prop"])
    logger = logger_factory(serializers=serializer)
    payload = {
        "main": {
            "keepProp": "Some value",
            "remove-prop": "remove with dash",
            "remove.prop": "remove with dot",
            "remove": {"prop": "DO NOT REMOVE"},
        }
    }
    snapshot = copy.deepcopy(payload)

    logger.info(payload)

    call = stdout_mock.only_call()
    assert call["main"] == {"keepProp": "Some value", "remove": {"prop": "DO NOT REMOVE"}}
    assert payload == snapshot


@pytest.mark.parametrize("value", [None, 123, [{"value": 123}]])
def test_serializer_ignores_non_mapping_property(logger_factory, stdout_mock, value):
    """Non-mapping values under the property are logged as-is."""

    logger = logger_factory(serializers=create_omit_properties_serializer("main", ["keepProp"]))

    logger.info({"main": value})

    assert stdout_mock.only_call()["main"] == value
