"""Resolved Protobuf types and the registry of known types."""

from .extension import MoreKnownTypes
from .known import ExtensionNotAllowedError, KnownTypes, KnownTypesRegistry, UnknownTypeError
from .model import EnumType, MessageType, ServiceType, Type, TypeKind
from .options import ApiOption, OptionIndex
from .typeset import TypeSet, TypeUrlPrefixes
from .url import MalformedTypeUrlError, Prefix, TypeUrl

__all__ = [
    "ApiOption",
    "EnumType",
    "ExtensionNotAllowedError",
    "KnownTypes",
    "KnownTypesRegistry",
    "MalformedTypeUrlError",
    "MessageType",
    "MoreKnownTypes",
    "OptionIndex",
    "Prefix",
    "ServiceType",
    "Type",
    "TypeKind",
    "TypeSet",
    "TypeUrl",
    "TypeUrlPrefixes",
    "UnknownTypeError",
]
