"""Tests for source path resolution and mapping flattening."""

from depmap import Keyed
from depmap import Multi
from depmap import Single
from depmap import copy_plan
from depmap import flatten_destinations
from depmap import resolve_source_path


def test_resolve_source_path_default_is_whole_tree():
    """Default sub-path selects everything in the folder."""
    assert resolve_source_path(".dep/widgets") == ".dep/widgets/*"


def test_resolve_source_path_leading_separator_ignored():
    """A leading "/" on the sub-path is insignificant."""
    assert resolve_source_path(".dep/widgets", "*") == resolve_source_path(".dep/widgets", "/*")
    assert resolve_source_path(".dep/widgets", "/src/core") == ".dep/widgets/src/core"


def test_resolve_source_path_trailing_separator_on_folder():
    """A trailing "/" on the folder does not double up."""
    assert resolve_source_path(".dep/widgets/", "src") == ".dep/widgets/src"


def test_resolve_source_path_escapes_spaces():
    """Spaces are escaped for shell consumption."""
    assert resolve_source_path(".dep/my widgets", "src dir/a b") == ".dep/my\\ widgets/src\\ dir/a\\ b"


def test_flatten_each_shape():
    """Single, Multi and Keyed all flatten to their destinations in order."""
    assert flatten_destinations(None) == []
    assert flatten_destinations(Single(path="/a")) == ["/a"]
    assert flatten_destinations(Multi(paths=("/a", "/b", "/a"))) == ["/a", "/b", "/a"]

    keyed = Keyed(entries={"src": Multi(paths=("/b", "/c")), "/": Single(path="/a")})
    assert flatten_destinations(keyed) == ["/b", "/c", "/a"]


def test_flatten_is_idempotent_over_its_output():
    """Re-flattening the flattened list wrapped as Multi gives the same list."""
    keyed = Keyed(entries={"src": Multi(paths=("/b", "/c")), "/": Single(path="/a")})
    flat = flatten_destinations(keyed)
    assert flatten_destinations(Multi(paths=tuple(flat))) == flat


def test_copy_plan_non_keyed_copies_whole_tree():
    """Single and Multi copy the whole tree to every destination."""
    assert copy_plan(None) == []
    assert copy_plan(Single(path="/a")) == [("*", ["/a"])]
    assert copy_plan(Multi(paths=("/a", "/b"))) == [("*", ["/a", "/b"])]


def test_copy_plan_keyed_uses_keys():
    """Keyed keys become sub-paths; "/" means the whole tree."""
    keyed = Keyed(entries={"src/core": Single(path="/lib/core"), "/": Multi(paths=("/vendor",))})
    assert copy_plan(keyed) == [("src/core", ["/lib/core"]), ("*", ["/vendor"])]


def test_copy_plan_and_flatten_agree():
    """Install and uninstall see the same destinations."""
    keyed = Keyed(
        entries={
            "src": Multi(paths=("/lib", "/lib2")),
            "docs": Single(path="/docs"),
            "/": Single(path="/vendor"),
        }
    )
    planned = [destination for _, destinations in copy_plan(keyed) for destination in destinations]
    assert planned == flatten_destinations(keyed)
