"""Raw and linked Protobuf file descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from google.protobuf import (
    any_pb2,
    api_pb2,
    descriptor_pb2,
    duration_pb2,
    empty_pb2,
    field_mask_pb2,
    source_context_pb2,
    struct_pb2,
    timestamp_pb2,
    type_pb2,
    wrappers_pb2,
)
from google.protobuf.compiler import plugin_pb2

RawFile = descriptor_pb2.FileDescriptorProto

GOOGLE_PROTOBUF_PACKAGE = "google.protobuf"

_WELL_KNOWN_MODULES = (
    any_pb2,
    api_pb2,
    descriptor_pb2,
    duration_pb2,
    empty_pb2,
    field_mask_pb2,
    source_context_pb2,
    struct_pb2,
    timestamp_pb2,
    type_pb2,
    wrappers_pb2,
    plugin_pb2,
)


@dataclass(frozen=True, eq=False)
class LinkedFile:
    """A raw file whose dependency names were looked up among linked files.

    ``dependencies`` holds only the dependencies that were found; names that never
    resolved are listed in ``missing``.
    """

    proto: RawFile
    dependencies: Tuple["LinkedFile", ...] = ()
    missing: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.proto.name

    @property
    def package(self) -> str:
        return self.proto.package

    @property
    def options(self) -> descriptor_pb2.FileOptions:
        return self.proto.options

    def is_google(self) -> bool:
        return self.package == GOOGLE_PROTOBUF_PACKAGE or self.package.startswith(
            GOOGLE_PROTOBUF_PACKAGE + "."
        )

    def __repr__(self) -> str:
        return f"LinkedFile({self.name!r})"


def well_known_files() -> List[RawFile]:
    """Return descriptors of the well-known files bundled with the protobuf runtime."""
    files: List[RawFile] = []
    for module in _WELL_KNOWN_MODULES:
        proto = RawFile()
        module.DESCRIPTOR.CopyToProto(proto)
        files.append(proto)
    return files


def parse_descriptor_set(path: Path) -> List[RawFile]:
    """Read the files of a serialized ``FileDescriptorSet``."""
    data = Path(path).read_bytes()
    descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(data)
    return list(descriptor_set.file)


__all__ = [
    "GOOGLE_PROTOBUF_PACKAGE",
    "LinkedFile",
    "RawFile",
    "parse_descriptor_set",
    "well_known_files",
]
