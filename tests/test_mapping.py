"""Tests for output mapping promotion (add_destination) and JSON codec."""

import pytest
from depmap import ROOT
from depmap import DependencyValidationError
from depmap import Keyed
from depmap import Multi
from depmap import Single
from depmap import add_destination
from depmap import flatten_destinations
from depmap import mapping_from_json
from depmap import mapping_to_json


def test_absent_root_becomes_single():
    """No mapping + root destination gives a Single."""
    assert add_destination(None, "/vendor/widgets") == Single(path="/vendor/widgets")


def test_absent_sub_path_becomes_keyed():
    """No mapping + sub-path gives a one-key Keyed mapping."""
    result = add_destination(None, "/lib/core", "src/core")
    assert result == Keyed(entries={"src/core": Single(path="/lib/core")})


def test_single_root_becomes_multi():
    """Second root destination promotes Single to Multi, keeping the first."""
    result = add_destination(Single(path="/vendor/widgets"), "/lib/widgets")
    assert result == Multi(paths=("/vendor/widgets", "/lib/widgets"))


def test_single_sub_path_promotes_to_keyed():
    """Single + sub-path keeps the old value under "/"."""
    result = add_destination(Single(path="a"), "b", "x")

    assert result == Keyed(entries={"x": Single(path="b"), ROOT: Single(path="a")})
    assert list(result.entries) == ["x", ROOT]


def test_multi_root_appends():
    """Multi + root destination appends, duplicates included."""
    result = add_destination(Multi(paths=("a", "b")), "a")
    assert result == Multi(paths=("a", "b", "a"))


def test_multi_sub_path_promotes_to_keyed():
    """Multi + sub-path keeps the whole list under "/"."""
    result = add_destination(Multi(paths=("/vendor/widgets",)), "/lib/core", "src/core")

    assert result == Keyed(
        entries={"src/core": Single(path="/lib/core"), ROOT: Multi(paths=("/vendor/widgets",))}
    )


@pytest.mark.parametrize("sub_path", [None, "", "/"])
def test_root_spellings_are_equivalent(sub_path):
    """None, empty string and "/" all mean the whole tree."""
    assert add_destination(Single(path="a"), "b", sub_path) == Multi(paths=("a", "b"))


def test_keyed_grows_root_entry():
    """Keyed + root destination grows the "/" entry through Single and Multi."""
    mapping = Keyed(entries={"src": Single(path="/lib")})

    mapping = add_destination(mapping, "/vendor")
    assert mapping.entries[ROOT] == Single(path="/vendor")

    mapping = add_destination(mapping, "/vendor2")
    assert mapping.entries[ROOT] == Multi(paths=("/vendor", "/vendor2"))

    mapping = add_destination(mapping, "/vendor3", "/")
    assert mapping.entries[ROOT] == Multi(paths=("/vendor", "/vendor2", "/vendor3"))
    assert mapping.entries["src"] == Single(path="/lib")


def test_keyed_grows_named_entry():
    """Keyed + existing sub-path grows that key only; new keys are appended."""
    mapping = Keyed(entries={"src": Single(path="/lib"), ROOT: Single(path="/vendor")})

    mapping = add_destination(mapping, "/lib2", "src")
    mapping = add_destination(mapping, "/docs", "docs")

    assert mapping.entries["src"] == Multi(paths=("/lib", "/lib2"))
    assert mapping.entries[ROOT] == Single(path="/vendor")
    assert list(mapping.entries) == ["src", ROOT, "docs"]


def test_add_destination_does_not_mutate_input():
    """The input mapping is left untouched."""
    original = Keyed(entries={"src": Single(path="/lib")})
    add_destination(original, "/lib2", "src")
    assert original.entries == {"src": Single(path="/lib")}


def test_add_destination_never_loses_destinations():
    """Every sequence of additions keeps all earlier destinations."""
    steps = [("a", None), ("b", "x"), ("c", None), ("d", "x"), ("e", "y"), ("f", "/"), ("a", "x")]
    mapping = None
    added: list[str] = []

    for destination, sub_path in steps:
        before = flatten_destinations(mapping)
        mapping = add_destination(mapping, destination, sub_path)
        after = flatten_destinations(mapping)
        added.append(destination)

        assert set(before) | {destination} <= set(after)
        assert sorted(after) == sorted(added)


def test_mapping_from_json_shapes():
    """Each JSON shape maps to its variant."""
    assert mapping_from_json(None) is None
    assert mapping_from_json("/a") == Single(path="/a")
    assert mapping_from_json(["/a"]) == Multi(paths=("/a",))
    assert mapping_from_json({"src": "/a", "/": ["/b", "/c"]}) == Keyed(
        entries={"src": Single(path="/a"), "/": Multi(paths=("/b", "/c"))}
    )


def test_mapping_from_json_rejects_nested_keyed():
    """Keyed values may not be objects."""
    with pytest.raises(DependencyValidationError, match="nested"):
        mapping_from_json({"src": {"deeper": "/a"}})


def test_mapping_to_json_preserves_shape():
    """A one-element list stays a list; key order is kept."""
    raw = {"src/core": "/lib/core", "/": ["/vendor/widgets"]}
    assert mapping_to_json(mapping_from_json(raw)) == raw
    assert list(mapping_to_json(mapping_from_json(raw))) == ["src/core", "/"]
    assert mapping_to_json(Multi(paths=("/a",))) == ["/a"]
    assert mapping_to_json(None) is None


def test_mapping_is_frozen():
    """Mapping values are immutable."""
    from pydantic import ValidationError

    single = Single(path="/a")
    with pytest.raises(ValidationError):
        single.path = "/b"
