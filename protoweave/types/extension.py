"""The privileged entry point for extending known types."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from ..descriptors.files import LinkedFile
from ..descriptors.fileset import FileSet
from .known import KnownTypes, KnownTypesRegistry
from .typeset import TypeSet, TypeUrlPrefixes


class MoreKnownTypes:
    """Adds the types of freshly linked files to a registry."""

    @staticmethod
    def extend_with(
        registry: KnownTypesRegistry,
        types: Union[TypeSet, FileSet, Iterable[LinkedFile]],
        prefixes: Optional[TypeUrlPrefixes] = None,
    ) -> KnownTypes:
        if not isinstance(types, TypeSet):
            types = TypeSet.from_files(types, prefixes)
        return registry.extend_with(types)


__all__ = ["MoreKnownTypes"]
