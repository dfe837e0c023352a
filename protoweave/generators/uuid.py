"""Classification of UUID value messages."""

from __future__ import annotations

from ..types.model import MessageType, Type


def is_uuid_value(type_: Type) -> bool:
    """A message with exactly one field, a string named ``uuid``."""
    return isinstance(type_, MessageType) and type_.is_uuid_value()


__all__ = ["is_uuid_value"]
