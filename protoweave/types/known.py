"""The registry of types known to the running process.

Readers take the current ``KnownTypes`` snapshot without locking. Writers extend the
registry under a lock and publish a new snapshot in a single reference assignment,
so a reader sees either the old or the new snapshot and never a partially merged one.
"""

from __future__ import annotations

import inspect
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Union

from ..descriptors.files import LinkedFile
from ..descriptors.linker import default_seed
from ..logging import get_logger
from .model import Type
from .typeset import TypeSet, TypeUrlPrefixes
from .url import TypeUrl

LOGGER = get_logger("known_types")

DEFAULT_ALLOWED_CALLERS = frozenset({"protoweave.types.extension"})

TypeRef = Union[TypeUrl, str]


class UnknownTypeError(LookupError):
    """Raised when a type name is not present in the current snapshot."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"No type `{type_name}` is known")
        self.type_name = type_name


class ExtensionNotAllowedError(PermissionError):
    """Raised when code outside the privileged callers tries to extend the registry."""


class KnownTypes:
    """An immutable, point-in-time view of every known type."""

    def __init__(
        self,
        types: TypeSet,
        version: int = 0,
        *,
        targets: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._types = types
        self.version = version
        computed: Dict[str, str] = dict(targets or {})
        for type_ in types:
            if type_.name not in computed:
                computed[type_.name] = type_.target
        self._targets = MappingProxyType(computed)

    @property
    def types(self) -> TypeSet:
        return self._types

    @property
    def targets(self) -> Mapping[str, str]:
        """Qualified type name to generated symbol name."""
        return self._targets

    def extended_with(self, more: TypeSet) -> "KnownTypes":
        combined = self._types.union(more)
        return KnownTypes(combined, self.version + 1, targets=self._targets)

    def contains(self, ref: TypeRef) -> bool:
        return self._types.contains(_type_name(ref))

    def find(self, name: str) -> Optional[Type]:
        return self._types.find(name)

    def get(self, name: str) -> Type:
        found = self._types.find(name)
        if found is None:
            raise UnknownTypeError(name)
        return found

    def class_name_of(self, ref: TypeRef) -> str:
        """Return the generated symbol of a type referenced by URL or qualified name."""
        name = _type_name(ref)
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def all_urls(self) -> Set[TypeUrl]:
        return {type_.url for type_ in self._types}

    def all_from_package(self, package: str) -> Set[TypeUrl]:
        """URLs of the types declared in ``package`` or its sub-packages."""
        return {type_.url for type_ in self._types if type_.belongs_to(package)}

    def type_names(self) -> List[str]:
        return sorted(self._types.names())

    def files(self) -> List[LinkedFile]:
        by_name: Dict[str, LinkedFile] = {}
        for type_ in self._types:
            by_name.setdefault(type_.declaring_file_name, type_.file)
        return [by_name[name] for name in sorted(by_name)]

    def file_names(self) -> List[str]:
        return [file.name for file in self.files()]

    def print_all_types(self) -> str:
        return "\n".join(sorted(url.value for url in self.all_urls()))

    def __len__(self) -> int:
        return len(self._types)

    def __str__(self) -> str:
        return f"KnownTypes:\n{self.print_all_types()}"


class KnownTypesRegistry:
    """Holds the current ``KnownTypes`` snapshot and serialises its extension."""

    def __init__(
        self,
        baseline: Optional[TypeSet] = None,
        *,
        allowed_callers: Iterable[str] = DEFAULT_ALLOWED_CALLERS,
    ) -> None:
        self._snapshot = KnownTypes(baseline if baseline is not None else TypeSet())
        self._lock = threading.Lock()
        self._allowed_callers = frozenset(allowed_callers)

    @classmethod
    def default(
        cls,
        prefixes: Optional[TypeUrlPrefixes] = None,
        *,
        allowed_callers: Iterable[str] = DEFAULT_ALLOWED_CALLERS,
    ) -> "KnownTypesRegistry":
        """Create a registry seeded with the well-known types of the protobuf runtime."""
        baseline = TypeSet.from_files(default_seed(), prefixes)
        return cls(baseline, allowed_callers=allowed_callers)

    def instance(self) -> KnownTypes:
        return self._snapshot

    def extend_with(self, more: TypeSet) -> KnownTypes:
        """Publish a snapshot holding the current types plus ``more``.

        Raises:
            ExtensionNotAllowedError: if the calling module is not a privileged caller.
        """
        caller = _caller_module()
        if caller not in self._allowed_callers:
            raise ExtensionNotAllowedError(
                f"Module `{caller}` is not allowed to extend known types"
            )
        LOGGER.debug("Adding %d types to known types", more.size)
        with self._lock:
            extended = self._snapshot.extended_with(more)
            self._snapshot = extended
        return extended


def _type_name(ref: TypeRef) -> str:
    if isinstance(ref, TypeUrl):
        return ref.to_name()
    if "/" in ref:
        return TypeUrl.parse(ref).to_name()
    return ref


def _caller_module() -> str:
    # Frames: _caller_module -> extend_with -> caller.
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
        if caller is None:
            return ""
        return str(caller.f_globals.get("__name__", ""))
    finally:
        del frame


__all__ = [
    "DEFAULT_ALLOWED_CALLERS",
    "ExtensionNotAllowedError",
    "KnownTypes",
    "KnownTypesRegistry",
    "UnknownTypeError",
]
