"""Adds factory-made nested classes to generated message classes."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..models import OutputFragment
from ..postproc.insertion import InsertionPoint
from ..types.model import MessageType
from .base import RuleGenerator
from .factories import FactoryRegistry, NestedClassFactory, nested_class_factories
from .rendering import TemplateRenderer
from .rules import GenerationRule


class NestedClassGenerator(RuleGenerator):
    """Rule targets name nested class factories; their output lands in the class scope."""

    name = "nested_classes"

    def __init__(
        self,
        rules: Sequence[GenerationRule] = (),
        *,
        factories: Optional[FactoryRegistry[NestedClassFactory]] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        super().__init__(rules)
        self.factories = factories or nested_class_factories()
        self.renderer = renderer or TemplateRenderer()

    def generate_for_rule(self, type_: MessageType, rule: GenerationRule) -> Iterable[OutputFragment]:
        factory = self.factories.get(rule.target)
        if factory is None:
            return []
        classes: List[str] = factory.create_classes(type_, self.renderer)
        return [InsertionPoint.CLASS_SCOPE.contribution(type_, source) for source in classes]


__all__ = ["NestedClassGenerator"]
