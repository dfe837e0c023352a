"""Type URLs used to tag packed Protobuf values with their runtime type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SEPARATOR = "/"


class MalformedTypeUrlError(ValueError):
    """Raised when a string is not a syntactically valid ``prefix/name`` type URL."""


class Prefix(str, Enum):
    """Prefixes with a fixed meaning."""

    GOOGLE_APIS = "type.googleapis.com"

    def __str__(self) -> str:
        return self.value


def compose(prefix: str, type_name: str) -> str:
    return f"{prefix}{SEPARATOR}{type_name}"


def _check_part(value: str, label: str, url: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MalformedTypeUrlError(f"Type URL {label} must not be blank: {url!r}")
    if SEPARATOR in value:
        raise MalformedTypeUrlError(f"Type URL {label} must not contain '/': {url!r}")
    return value


@dataclass(frozen=True)
class TypeUrl:
    """A ``prefix/qualified.TypeName`` pair."""

    prefix: str
    type_name: str

    def __post_init__(self) -> None:
        url = compose(str(self.prefix), str(self.type_name))
        object.__setattr__(self, "prefix", _check_part(str(self.prefix), "prefix", url))
        _check_part(self.type_name, "type name", url)

    @classmethod
    def parse(cls, value: str) -> "TypeUrl":
        """Parse a type URL string, raising ``MalformedTypeUrlError`` when it is garbled."""
        if not isinstance(value, str) or not value:
            raise MalformedTypeUrlError(f"Type URL must be a non-empty string: {value!r}")
        if SEPARATOR not in value:
            raise MalformedTypeUrlError(f"Malformed type URL: {value}")
        parts = value.split(SEPARATOR)
        if len(parts) != 2:
            raise MalformedTypeUrlError(f"Invalid Protobuf type URL encountered: {value}")
        prefix, type_name = parts
        return cls(prefix, type_name)

    @property
    def value(self) -> str:
        return compose(self.prefix, self.type_name)

    def to_name(self) -> str:
        return self.type_name

    def __str__(self) -> str:
        return self.value


__all__ = ["MalformedTypeUrlError", "Prefix", "SEPARATOR", "TypeUrl", "compose"]
