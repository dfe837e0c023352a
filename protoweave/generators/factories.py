"""Factories of Java members added to generated message classes.

A factory is registered under a name that generation rules use as their target.
Besides the built-in factories, packages may contribute more through the
``protoweave.method_factories`` and ``protoweave.nested_class_factories``
entry point groups.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from importlib import metadata
from typing import Callable, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from ..logging import get_logger
from ..types.model import MessageType
from .rendering import TemplateRenderer

LOGGER = get_logger("factories")

METHOD_FACTORIES_GROUP = "protoweave.method_factories"
NESTED_CLASS_FACTORIES_GROUP = "protoweave.nested_class_factories"


class MethodFactory(ABC):
    """Creates the source of methods added to a message class."""

    @abstractmethod
    def create_methods(self, type_: MessageType, renderer: TemplateRenderer) -> List[str]:
        """Return method declarations for ``type_``; may be empty."""


class NestedClassFactory(ABC):
    """Creates the source of classes nested in a message class."""

    @abstractmethod
    def create_classes(self, type_: MessageType, renderer: TemplateRenderer) -> List[str]:
        """Return class declarations for ``type_``; may be empty."""


class UuidMethodFactory(MethodFactory):
    """``generate()`` and ``of(String)`` for UUID value messages."""

    def create_methods(self, type_: MessageType, renderer: TemplateRenderer) -> List[str]:
        if not type_.is_uuid_value():
            LOGGER.debug("Skipping UUID methods for `%s`: not a UUID value", type_.name)
            return []
        return [
            renderer.render("uuid_methods.java.j2", method=method, class_name=type_.simple_name)
            for method in ("generate", "of")
        ]


class FieldNamesFactory(NestedClassFactory):
    """A nested ``Field`` class with a constant per field name."""

    def create_classes(self, type_: MessageType, renderer: TemplateRenderer) -> List[str]:
        if not type_.fields:
            return []
        fields = [
            {"name": field.name, "constant": _constant_name(field.name)} for field in type_.fields
        ]
        return [renderer.render("field_names.java.j2", type_name=type_.simple_name, fields=fields)]


F = TypeVar("F")


class FactoryRegistry(Generic[F]):
    """Named factories of one kind, discovered on first use."""

    def __init__(
        self,
        kind: Type[F],
        group: str,
        builtins: Mapping[str, Callable[[], F]],
    ) -> None:
        self._kind = kind
        self._group = group
        self._builtins = dict(builtins)
        self._factories: Optional[Dict[str, F]] = None

    def get(self, name: str) -> Optional[F]:
        """Return the factory registered as ``name``; unknown names are logged and skipped."""
        factories = self._load()
        factory = factories.get(name.strip())
        if factory is None:
            LOGGER.warning("Unknown %s `%s`; no code is generated for it", self._kind.__name__, name)
        return factory

    def names(self) -> List[str]:
        return sorted(self._load())

    def _load(self) -> Dict[str, F]:
        if self._factories is not None:
            return self._factories
        factories: Dict[str, F] = {}

        def _add(name: str, factory: Callable[[], F]) -> None:
            if name in factories:
                return
            instance = factory()
            if not isinstance(instance, self._kind):
                raise TypeError(
                    f"Factory '{name}' did not produce a {self._kind.__name__} instance"
                )
            factories[name] = instance

        for name, factory in self._builtins.items():
            _add(name, factory)

        for entry in _iter_entry_points(self._group):
            try:
                loaded = entry.load()
            except Exception as exc:  # pragma: no cover - defensive guard
                raise RuntimeError(f"Failed to load factory entry point '{entry.name}': {exc}") from exc

            def _factory(obj: object = loaded) -> F:
                return self._coerce(obj)

            _add(entry.name, _factory)

        self._factories = factories
        return factories

    def _coerce(self, obj: object) -> F:
        if isinstance(obj, self._kind):
            return obj
        if callable(obj):
            return obj()  # type: ignore[no-any-return]
        raise TypeError(f"Entry point must be a {self._kind.__name__} subclass or factory")


_BUILTIN_METHOD_FACTORIES: Dict[str, Callable[[], MethodFactory]] = {
    "uuid": UuidMethodFactory,
}

_BUILTIN_NESTED_CLASS_FACTORIES: Dict[str, Callable[[], NestedClassFactory]] = {
    "fields": FieldNamesFactory,
}


def method_factories() -> FactoryRegistry[MethodFactory]:
    return FactoryRegistry(MethodFactory, METHOD_FACTORIES_GROUP, _BUILTIN_METHOD_FACTORIES)


def nested_class_factories() -> FactoryRegistry[NestedClassFactory]:
    return FactoryRegistry(
        NestedClassFactory, NESTED_CLASS_FACTORIES_GROUP, _BUILTIN_NESTED_CLASS_FACTORIES
    )


def _iter_entry_points(group: str) -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=group)


def _constant_name(field_name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", field_name).upper()


__all__ = [
    "FactoryRegistry",
    "FieldNamesFactory",
    "MethodFactory",
    "NestedClassFactory",
    "UuidMethodFactory",
    "method_factories",
    "nested_class_factories",
]
