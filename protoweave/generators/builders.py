"""Makes generated message builders implement Java interfaces."""

from __future__ import annotations

from typing import Iterable

from ..models import OutputFragment
from ..postproc.insertion import InsertionPoint
from ..types.model import MessageType
from .base import RuleGenerator
from .interfaces import InterfaceSpec
from .rules import GenerationRule


class BuilderGenerator(RuleGenerator):
    """Adds the rule target to the interfaces implemented by the message builder."""

    name = "builders"

    def generate_for_rule(self, type_: MessageType, rule: GenerationRule) -> Iterable[OutputFragment]:
        interface = InterfaceSpec.parse(rule.target, type_.java_package)
        return [
            InsertionPoint.BUILDER_IMPLEMENTS.contribution(type_, f"{interface.qualified_name},")
        ]


__all__ = ["BuilderGenerator"]
