"""Adds factory-made methods to generated message classes."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..models import OutputFragment
from ..postproc.insertion import InsertionPoint
from ..types.model import MessageType
from .base import RuleGenerator
from .factories import FactoryRegistry, MethodFactory, method_factories
from .rendering import TemplateRenderer
from .rules import GenerationRule


class MethodGenerator(RuleGenerator):
    """Rule targets name method factories; their output lands in the class scope."""

    name = "methods"

    def __init__(
        self,
        rules: Sequence[GenerationRule] = (),
        *,
        uuid_factories: Sequence[str] = (),
        factories: Optional[FactoryRegistry[MethodFactory]] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        super().__init__(rules)
        self.uuid_factories = tuple(name for name in uuid_factories if name.strip())
        self.factories = factories or method_factories()
        self.renderer = renderer or TemplateRenderer()

    def generate_for_rule(self, type_: MessageType, rule: GenerationRule) -> Iterable[OutputFragment]:
        return self._methods(type_, rule.target)

    def generate_for_uuid(self, type_: MessageType) -> Iterable[OutputFragment]:
        fragments: List[OutputFragment] = []
        for factory_name in self.uuid_factories:
            fragments.extend(self._methods(type_, factory_name))
        return fragments

    def _methods(self, type_: MessageType, factory_name: str) -> List[OutputFragment]:
        factory = self.factories.get(factory_name)
        if factory is None:
            return []
        return [
            InsertionPoint.CLASS_SCOPE.contribution(type_, method)
            for method in factory.create_methods(type_, self.renderer)
        ]


__all__ = ["MethodGenerator"]
