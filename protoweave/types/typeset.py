"""Immutable, insertion-ordered sets of resolved types."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from ..descriptors.files import LinkedFile
from .model import EnumType, MessageType, ServiceType, Type
from .url import Prefix


class TypeUrlPrefixes:
    """Resolves the type URL prefix of the types declared in a file.

    Types of ``google.protobuf`` always use the Google APIs prefix; custom types use a
    per-file override or the project-wide default.
    """

    def __init__(
        self,
        default: str = Prefix.GOOGLE_APIS.value,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.default = str(default)
        self.overrides: Dict[str, str] = dict(overrides or {})

    def prefix_for(self, file: LinkedFile) -> str:
        if file.is_google():
            return Prefix.GOOGLE_APIS.value
        return self.overrides.get(file.name, self.default)


class TypeSet:
    """Types keyed by qualified name.

    The first type registered under a name wins, so a union never replaces a type
    that is already part of the set.
    """

    def __init__(self, types: Iterable[Type] = ()) -> None:
        self._types: Dict[str, Type] = {}
        for type_ in types:
            self._types.setdefault(type_.name, type_)

    @classmethod
    def from_file(cls, file: LinkedFile, prefixes: Optional[TypeUrlPrefixes] = None) -> "TypeSet":
        """Collect messages (with nested declarations), enums and services of ``file``."""
        prefix = (prefixes or TypeUrlPrefixes()).prefix_for(file)
        collected: List[Type] = []
        for message in file.proto.message_type:
            if message.options.map_entry:
                continue
            _collect_message(MessageType(message, file, url_prefix=prefix), collected)
        for enum in file.proto.enum_type:
            collected.append(EnumType(enum, file, url_prefix=prefix))
        for service in file.proto.service:
            collected.append(ServiceType(service, file, url_prefix=prefix))
        return cls(collected)

    @classmethod
    def from_files(
        cls, files: Iterable[LinkedFile], prefixes: Optional[TypeUrlPrefixes] = None
    ) -> "TypeSet":
        result = cls()
        for file in files:
            result = result.union(cls.from_file(file, prefixes))
        return result

    def find(self, name: str) -> Optional[Type]:
        return self._types.get(name)

    def contains(self, name: str) -> bool:
        return name in self._types

    def union(self, other: "TypeSet") -> "TypeSet":
        if other.is_empty():
            return self
        if self.is_empty():
            return other
        return TypeSet([*self._types.values(), *other._types.values()])

    def all_types(self) -> List[Type]:
        return list(self._types.values())

    def messages(self) -> List[MessageType]:
        return [type_ for type_ in self._types.values() if isinstance(type_, MessageType)]

    def enums(self) -> List[EnumType]:
        return [type_ for type_ in self._types.values() if isinstance(type_, EnumType)]

    def services(self) -> List[ServiceType]:
        return [type_ for type_ in self._types.values() if isinstance(type_, ServiceType)]

    def names(self) -> List[str]:
        return list(self._types)

    @property
    def size(self) -> int:
        return len(self._types)

    def is_empty(self) -> bool:
        return not self._types

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[Type]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeSet):
            return NotImplemented
        return set(self._types) == set(other._types)

    def __repr__(self) -> str:
        return f"TypeSet({sorted(self._types)})"


def _collect_message(message: MessageType, collected: List[Type]) -> None:
    collected.append(message)
    for nested in message.nested_types():
        _collect_message(nested, collected)
    collected.extend(message.nested_enums())


__all__ = ["TypeSet", "TypeUrlPrefixes"]
