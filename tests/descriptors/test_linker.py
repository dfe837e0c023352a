"""Tests for protoweave.descriptors.linker."""

from __future__ import annotations

import logging

import pytest
from google.protobuf import any_pb2, descriptor_pb2

from protoweave.descriptors import FileSet, LinkedFile, Linker, link, well_known_files
from protoweave.descriptors.linker import default_seed
from tests._fixtures.descriptors import STRING, file_proto, message


def _descriptor_of(module) -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto()
    module.DESCRIPTOR.CopyToProto(proto)
    return proto


def test_link_well_known_files_without_dependencies() -> None:
    files = [_descriptor_of(any_pb2), _descriptor_of(descriptor_pb2)]

    result = link(files, seed=FileSet())

    assert result.resolved.file_names() == [
        "google/protobuf/any.proto",
        "google/protobuf/descriptor.proto",
    ]
    assert len(result.partially_resolved) == 0
    assert len(result.unresolved) == 0
    assert result.is_complete()


def test_link_resolves_files_listed_out_of_dependency_order() -> None:
    top = file_proto("top.proto", "acme", dependencies=["middle.proto"])
    middle = file_proto("middle.proto", "acme", dependencies=["base.proto"])
    base = file_proto("base.proto", "acme")

    result = link([top, middle, base], seed=FileSet())

    assert result.resolved.file_names() == ["base.proto", "middle.proto", "top.proto"]
    linked_top = result.resolved.try_find("top.proto")
    assert linked_top is not None
    assert linked_top.dependencies == (result.resolved.try_find("middle.proto"),)
    assert linked_top.missing == ()


def test_link_uses_well_known_files_as_default_seed() -> None:
    event = file_proto(
        "event.proto",
        "acme",
        dependencies=["google/protobuf/timestamp.proto", "google/protobuf/any.proto"],
    )

    result = link([event])

    linked_event = result.resolved.try_find("event.proto")
    assert linked_event is not None
    assert [dependency.name for dependency in linked_event.dependencies] == [
        "google/protobuf/timestamp.proto",
        "google/protobuf/any.proto",
    ]
    assert result.resolved.file_names() == ["event.proto"]


def test_default_seed_changes_do_not_leak_between_callers() -> None:
    seed = default_seed()
    seed.add(LinkedFile(file_proto("stray.proto", "acme")))
    dependent = file_proto("dependent.proto", "acme", dependencies=["stray.proto"])

    result = link([dependent])

    assert "stray.proto" in seed
    assert "stray.proto" not in default_seed()
    assert "google/protobuf/any.proto" in default_seed()
    assert result.resolved.file_names() == []
    assert result.unresolved.file_names() == ["dependent.proto"]


def test_link_classifies_partially_resolved_files() -> None:
    base = file_proto("base.proto")
    partial = file_proto("partial.proto", dependencies=["base.proto", "missing.proto"])
    dependent = file_proto("dependent.proto", dependencies=["partial.proto"])

    # The dependent file comes first, so classifying it takes a second pass.
    result = link([dependent, partial, base], seed=FileSet())

    assert result.resolved.file_names() == ["base.proto"]
    assert result.partially_resolved.file_names() == ["dependent.proto", "partial.proto"]
    linked_partial = result.partially_resolved.try_find("partial.proto")
    assert linked_partial is not None
    assert [dependency.name for dependency in linked_partial.dependencies] == ["base.proto"]
    assert linked_partial.missing == ("missing.proto",)
    assert not result.is_complete()


def test_link_classifies_unresolved_files() -> None:
    orphan = file_proto("orphan.proto", dependencies=["nowhere.proto", "nothing.proto"])

    result = link([orphan], seed=FileSet())

    assert result.unresolved.file_names() == ["orphan.proto"]
    linked_orphan = result.unresolved.try_find("orphan.proto")
    assert linked_orphan is not None
    assert linked_orphan.dependencies == ()
    assert linked_orphan.missing == ("nowhere.proto", "nothing.proto")
    assert result.all_files().file_names() == ["orphan.proto"]


def test_every_input_file_lands_in_exactly_one_view() -> None:
    files = [
        file_proto("a.proto"),
        file_proto("b.proto", dependencies=["a.proto"]),
        file_proto("c.proto", dependencies=["a.proto", "x.proto"]),
        file_proto("d.proto", dependencies=["y.proto"]),
    ]

    result = link(files, seed=FileSet())

    views = [result.resolved, result.partially_resolved, result.unresolved]
    for raw in files:
        assert sum(raw.name in view for view in views) == 1
    assert result.remaining == ()


def test_input_file_shadows_seed_file_of_same_name() -> None:
    custom_any = file_proto(
        "google/protobuf/any.proto",
        "google.protobuf",
        messages=[message("Any", ("type_url", STRING)), message("Extra")],
    )
    user = file_proto("user.proto", dependencies=["google/protobuf/any.proto"])

    result = link([user, custom_any])

    linked_any = result.resolved.try_find("google/protobuf/any.proto")
    assert linked_any is not None
    assert [declared.name for declared in linked_any.proto.message_type] == ["Any", "Extra"]
    linked_user = result.resolved.try_find("user.proto")
    assert linked_user is not None
    assert linked_user.dependencies[0] is linked_any


def test_duplicate_input_names_keep_first_and_warn(caplog: pytest.LogCaptureFixture) -> None:
    first = file_proto("dup.proto", "first")
    second = file_proto("dup.proto", "second")

    with caplog.at_level(logging.WARNING, logger="protoweave.linker"):
        result = link([first, second], seed=FileSet())

    linked_dup = result.resolved.try_find("dup.proto")
    assert linked_dup is not None
    assert linked_dup.package == "first"
    assert "Duplicate descriptor for dup.proto" in caplog.text


def test_linker_resolves_only_once() -> None:
    linker = Linker([file_proto("a.proto")], seed=FileSet())
    linker.resolve()

    assert linker.resolved().file_names() == ["a.proto"]
    with pytest.raises(RuntimeError):
        linker.resolve()


def test_well_known_files_link_among_themselves() -> None:
    result = link(well_known_files(), seed=FileSet())

    assert result.is_complete()
    assert "google/protobuf/compiler/plugin.proto" in result.resolved
    assert "google/protobuf/type.proto" in result.resolved
