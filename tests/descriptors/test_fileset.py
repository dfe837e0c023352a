"""Tests for protoweave.descriptors.fileset."""

from __future__ import annotations

from protoweave.descriptors import FileSet, LinkedFile
from tests._fixtures.descriptors import file_proto


def _linked(name: str, package: str = "acme") -> LinkedFile:
    return LinkedFile(file_proto(name, package))


def test_add_keeps_first_file_with_a_name() -> None:
    files = FileSet()
    first = _linked("a.proto", "first")

    assert files.add(first) is True
    assert files.add(_linked("a.proto", "second")) is False
    assert files.try_find("a.proto") is first
    assert len(files) == 1


def test_find_returns_subset_of_known_names() -> None:
    files = FileSet([_linked("a.proto"), _linked("b.proto"), _linked("c.proto")])

    found = files.find(["c.proto", "a.proto", "zzz.proto"])

    assert found.file_names() == ["a.proto", "c.proto"]
    assert files.contains_all(["a.proto", "b.proto"])
    assert not files.contains_all(["a.proto", "zzz.proto"])


def test_union_prefers_files_of_the_left_side() -> None:
    left_a = _linked("a.proto", "left")
    left = FileSet([left_a])
    right = FileSet([_linked("a.proto", "right"), _linked("b.proto")])

    union = left.union(right)

    assert union.file_names() == ["a.proto", "b.proto"]
    assert union.try_find("a.proto") is left_a
    assert [file.name for file in union] == ["a.proto", "b.proto"]


def test_file_names_are_sorted_while_iteration_keeps_insertion_order() -> None:
    files = FileSet([_linked("z.proto"), _linked("m.proto"), _linked("a.proto")])

    assert files.file_names() == ["a.proto", "m.proto", "z.proto"]
    assert [file.name for file in files] == ["z.proto", "m.proto", "a.proto"]
    assert "m.proto" in files
    assert files.try_find("nope.proto") is None
