"""Insertion points protoc's Java generator leaves in the sources it writes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..models import OutputFragment

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..types.model import Type

MARKER_TEMPLATE = "@@protoc_insertion_point({})"


class InsertionPoint(str, Enum):
    MESSAGE_IMPLEMENTS = "message_implements"
    BUILDER_IMPLEMENTS = "builder_implements"
    CLASS_SCOPE = "class_scope"
    BUILDER_SCOPE = "builder_scope"
    OUTER_CLASS_SCOPE = "outer_class_scope"

    def for_type(self, type_: "Type") -> str:
        """Name of this insertion point inside the code generated for ``type_``."""
        if self is InsertionPoint.OUTER_CLASS_SCOPE:
            return self.value
        return f"{self.value}:{type_.name}"

    def contribution(self, type_: "Type", content: str) -> OutputFragment:
        """A fragment splicing ``content`` into the source file hosting ``type_``."""
        return OutputFragment(
            name=type_.source_file,
            content=content,
            insertion_point=self.for_type(type_),
        )

    @staticmethod
    def marker(name: str) -> str:
        return MARKER_TEMPLATE.format(name)


__all__ = ["InsertionPoint", "MARKER_TEMPLATE"]
