"""Lookup of custom options declared by extensions of the descriptor options.

Custom extensions are not registered with the protobuf runtime, so their values
arrive as unknown fields of the options messages. ``OptionIndex`` maps extension
names to field numbers using the extension declarations of the linked files.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from google.protobuf import descriptor_pb2
from google.protobuf.message import Message
from google.protobuf.unknown_fields import UnknownFieldSet

from ..descriptors.files import LinkedFile
from .model import MessageType, ServiceType

FILE_OPTIONS = "google.protobuf.FileOptions"
MESSAGE_OPTIONS = "google.protobuf.MessageOptions"
SERVICE_OPTIONS = "google.protobuf.ServiceOptions"
FIELD_OPTIONS = "google.protobuf.FieldOptions"

_WIRE_VARINT = 0
_WIRE_LENGTH_DELIMITED = 2


class OptionIndex:
    """Field numbers of extensions keyed by ``(extendee, full name)``."""

    def __init__(self, numbers: Optional[Dict[Tuple[str, str], int]] = None) -> None:
        self._numbers: Dict[Tuple[str, str], int] = dict(numbers or {})

    @classmethod
    def from_files(cls, files: Iterable[LinkedFile]) -> "OptionIndex":
        index = cls()
        for file in files:
            index._add_all(file.proto.extension, file.package)
            for message in file.proto.message_type:
                index._add_nested(message, file.package)
        return index

    def number_of(self, extendee: str, full_name: str) -> Optional[int]:
        return self._numbers.get((extendee.lstrip("."), full_name.lstrip(".")))

    def _add_nested(self, message: descriptor_pb2.DescriptorProto, scope: str) -> None:
        message_scope = f"{scope}.{message.name}" if scope else message.name
        self._add_all(message.extension, message_scope)
        for nested in message.nested_type:
            self._add_nested(nested, message_scope)

    def _add_all(self, extensions: Iterable[descriptor_pb2.FieldDescriptorProto], scope: str) -> None:
        for extension in extensions:
            full_name = f"{scope}.{extension.name}" if scope else extension.name
            self._numbers.setdefault((extension.extendee.lstrip("."), full_name), extension.number)

    def __len__(self) -> int:
        return len(self._numbers)


def _values(options: Message, number: int, wire_type: int) -> List[object]:
    return [
        field.data
        for field in UnknownFieldSet(options)
        if field.field_number == number and field.wire_type == wire_type
    ]


def find_bool_option(
    options: Message, extendee: str, full_name: str, index: OptionIndex
) -> Optional[bool]:
    """Value of a boolean option, or ``None`` when it is not set or not declared."""
    number = index.number_of(extendee, full_name)
    if number is None:
        return None
    values = _values(options, number, _WIRE_VARINT)
    return bool(values[-1]) if values else None


def find_string_option(
    options: Message, extendee: str, full_name: str, index: OptionIndex
) -> Optional[str]:
    """Value of a string option, or ``None`` when it is not set or not declared."""
    number = index.number_of(extendee, full_name)
    if number is None:
        return None
    values = _values(options, number, _WIRE_LENGTH_DELIMITED)
    if not values:
        return None
    raw = values[-1]
    return raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)


Declaration = Union[LinkedFile, MessageType, ServiceType, descriptor_pb2.FieldDescriptorProto]


class ApiOption(Enum):
    """API status options and the option names each applies through.

    Every variant carries the names of its file-level, message-level, service-level
    and field-level options; ``None`` marks a level the status cannot be set on.
    """

    BETA = ("spine.beta_all", "spine.beta_type", None, "spine.beta")
    EXPERIMENTAL = (
        "spine.experimental_all",
        "spine.experimental_type",
        None,
        "spine.experimental",
    )
    INTERNAL = ("spine.internal_all", "spine.internal_type", None, "spine.internal")
    SPI = ("spine.SPI_all", "spine.SPI_type", "spine.SPI_service", None)

    def __init__(
        self,
        file_option: str,
        message_option: str,
        service_option: Optional[str],
        field_option: Optional[str],
    ) -> None:
        self.file_option = file_option
        self.message_option = message_option
        self.service_option = service_option
        self.field_option = field_option

    def supports_services(self) -> bool:
        return self.service_option is not None

    def supports_fields(self) -> bool:
        return self.field_option is not None

    def find_in(self, declaration: Declaration, index: OptionIndex) -> Optional[bool]:
        """Return the option value set on ``declaration``, ``None`` when absent."""
        if isinstance(declaration, LinkedFile):
            return find_bool_option(declaration.options, FILE_OPTIONS, self.file_option, index)
        if isinstance(declaration, MessageType):
            return find_bool_option(
                declaration.proto.options, MESSAGE_OPTIONS, self.message_option, index
            )
        if isinstance(declaration, ServiceType):
            if self.service_option is None:
                raise ValueError(f"Option {self} does not support services.")
            return find_bool_option(
                declaration.proto.options, SERVICE_OPTIONS, self.service_option, index
            )
        if isinstance(declaration, descriptor_pb2.FieldDescriptorProto):
            if self.field_option is None:
                raise ValueError(f"Option {self} does not support fields.")
            return find_bool_option(declaration.options, FIELD_OPTIONS, self.field_option, index)
        raise TypeError(f"Unsupported declaration: {declaration!r}")

    def __str__(self) -> str:
        return self.message_option.rsplit(".", 1)[-1]


__all__ = [
    "ApiOption",
    "FIELD_OPTIONS",
    "FILE_OPTIONS",
    "MESSAGE_OPTIONS",
    "OptionIndex",
    "SERVICE_OPTIONS",
    "find_bool_option",
    "find_string_option",
]
