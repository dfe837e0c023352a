"""Protobuf declarations resolved from linked files."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, List, Optional, Set, Tuple, Union

from google.protobuf import descriptor_pb2

from ..descriptors.files import LinkedFile
from .url import Prefix, TypeUrl

PACKAGE_SEPARATOR = "."
GRPC_SUFFIX = "Grpc"
OUTER_CLASS_SUFFIX = "OuterClass"
UUID_FIELD = "uuid"

DeclarationProto = Union[
    descriptor_pb2.DescriptorProto,
    descriptor_pb2.EnumDescriptorProto,
    descriptor_pb2.ServiceDescriptorProto,
]


class TypeKind(str, Enum):
    MESSAGE = "message"
    ENUM = "enum"
    SERVICE = "service"


class Type:
    """A named message, enum or service declared in a linked file.

    Types form a tree through ``parent``; a top-level declaration has no parent and
    belongs to exactly one file. Two types are equal when their qualified names are.
    """

    kind: ClassVar[TypeKind]

    def __init__(
        self,
        proto: DeclarationProto,
        file: LinkedFile,
        parent: Optional["MessageType"] = None,
        *,
        url_prefix: str = Prefix.GOOGLE_APIS.value,
    ) -> None:
        self.proto = proto
        self.file = file
        self.parent = parent
        self.url_prefix = str(url_prefix)
        scope = parent.name if parent is not None else file.package
        self.name = f"{scope}{PACKAGE_SEPARATOR}{proto.name}" if scope else proto.name

    @property
    def simple_name(self) -> str:
        return self.proto.name

    @property
    def url(self) -> TypeUrl:
        return TypeUrl(self.url_prefix, self.name)

    @property
    def declaring_file_name(self) -> str:
        return self.file.name

    @property
    def is_top_level(self) -> bool:
        return self.parent is None

    def is_google(self) -> bool:
        return self.file.is_google()

    def root(self) -> "Type":
        current: Type = self
        while current.parent is not None:
            current = current.parent
        return current

    def nesting(self) -> Tuple[str, ...]:
        """Simple names from the top-level declaration down to this type."""
        names: List[str] = []
        current: Optional[Type] = self
        while current is not None:
            names.append(current.simple_name)
            current = current.parent
        return tuple(reversed(names))

    def belongs_to(self, package: str) -> bool:
        return self.name.startswith(package + PACKAGE_SEPARATOR) if package else True

    @property
    def java_package(self) -> str:
        return self.file.options.java_package or self.file.package

    @property
    def target(self) -> str:
        """Fully qualified name of the generated Java symbol."""
        outer = None if self.file.options.java_multiple_files else outer_class_name(self.file)
        parts = [self.java_package, outer, *self.nesting()]
        return PACKAGE_SEPARATOR.join(part for part in parts if part)

    @property
    def source_file(self) -> str:
        """Path of the Java source file hosting the generated symbol."""
        if self.file.options.java_multiple_files:
            class_name = self.nesting()[0]
        else:
            class_name = outer_class_name(self.file)
        return _source_path(self.java_package, class_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class MessageType(Type):
    """A message declaration."""

    kind = TypeKind.MESSAGE
    proto: descriptor_pb2.DescriptorProto

    @property
    def fields(self) -> List[descriptor_pb2.FieldDescriptorProto]:
        return list(self.proto.field)

    @property
    def is_map_entry(self) -> bool:
        return self.proto.options.map_entry

    def is_uuid_value(self) -> bool:
        """Tell whether the message holds nothing but a string `uuid` field."""
        fields = self.proto.field
        return (
            len(fields) == 1
            and fields[0].name == UUID_FIELD
            and fields[0].type == descriptor_pb2.FieldDescriptorProto.TYPE_STRING
        )

    def nested_types(self) -> List["MessageType"]:
        return [
            MessageType(nested, self.file, self, url_prefix=self.url_prefix)
            for nested in self.proto.nested_type
            if not nested.options.map_entry
        ]

    def nested_enums(self) -> List["EnumType"]:
        return [
            EnumType(nested, self.file, self, url_prefix=self.url_prefix)
            for nested in self.proto.enum_type
        ]


class EnumType(Type):
    """An enum declaration."""

    kind = TypeKind.ENUM
    proto: descriptor_pb2.EnumDescriptorProto


class ServiceType(Type):
    """A service declaration; gRPC stubs live in a ``<Name>Grpc`` class."""

    kind = TypeKind.SERVICE
    proto: descriptor_pb2.ServiceDescriptorProto

    @property
    def target(self) -> str:
        class_name = self.simple_name + GRPC_SUFFIX
        return PACKAGE_SEPARATOR.join(part for part in (self.java_package, class_name) if part)

    @property
    def source_file(self) -> str:
        return _source_path(self.java_package, self.simple_name + GRPC_SUFFIX)


def outer_class_name(file: LinkedFile) -> str:
    """Name of the Java class wrapping declarations of ``file``."""
    explicit = file.options.java_outer_classname
    if explicit:
        return explicit
    stem = file.name.rsplit("/", 1)[-1]
    if stem.endswith(".proto"):
        stem = stem[: -len(".proto")]
    name = _camel_case(stem)
    if name in _declared_names(file.proto):
        name += OUTER_CLASS_SUFFIX
    return name


def _declared_names(proto: descriptor_pb2.FileDescriptorProto) -> Set[str]:
    """Simple names of every message, enum and service of a file, nested ones included."""
    names: Set[str] = {service.name for service in proto.service}
    names.update(enum.name for enum in proto.enum_type)
    pending = list(proto.message_type)
    while pending:
        message = pending.pop()
        names.add(message.name)
        names.update(enum.name for enum in message.enum_type)
        pending.extend(message.nested_type)
    return names


def _camel_case(value: str) -> str:
    result: List[str] = []
    capitalize_next = True
    for char in value:
        if char.isascii() and char.isalpha():
            result.append(char.upper() if capitalize_next else char)
            capitalize_next = False
        elif char.isdigit():
            result.append(char)
            capitalize_next = True
        else:
            capitalize_next = True
    return "".join(result)


def _source_path(java_package: str, class_name: str) -> str:
    directory = java_package.replace(PACKAGE_SEPARATOR, "/")
    return f"{directory}/{class_name}.java" if directory else f"{class_name}.java"


__all__ = [
    "EnumType",
    "MessageType",
    "ServiceType",
    "Type",
    "TypeKind",
    "outer_class_name",
]
