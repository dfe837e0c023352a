"""Base classes for code generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..models import OutputFragment
from ..types.model import MessageType, Type
from .rules import GenerationRule
from .uuid import is_uuid_value

LOGGER = get_logger("generators")


class GenerationError(RuntimeError):
    """Raised when a generator fails on a type; carries the type and the rule target."""

    def __init__(self, type_name: str, target: Optional[str], cause: BaseException) -> None:
        where = f" for rule `{target}`" if target else ""
        super().__init__(f"Failed to generate code for `{type_name}`{where}: {cause}")
        self.type_name = type_name
        self.target = target


class CodeGenerator(ABC):
    """Contract for generators that emit fragments for a single type."""

    name: ClassVar[str] = ""

    @abstractmethod
    def generate(self, type_: Type) -> List[OutputFragment]:
        """Produce the fragments of generated code for ``type_``."""


class RuleGenerator(CodeGenerator):
    """Evaluates an ordered list of generation rules against message types.

    A UUID value message is handed to ``generate_for_uuid`` and skips the rules.
    Any other message goes through the rules in declaration order: a rule applies
    when its target is not blank, ``custom_filter`` accepts it and its pattern
    matches the name of the file declaring the message. Outputs of applicable rules
    are concatenated in rule order.
    """

    def __init__(self, rules: Sequence[GenerationRule] = ()) -> None:
        self.rules = tuple(rules)

    def generate(self, type_: Type) -> List[OutputFragment]:
        if not isinstance(type_, MessageType):
            return []
        if is_uuid_value(type_):
            return produce(type_, None, lambda: self.generate_for_uuid(type_))
        fragments: List[OutputFragment] = []
        rules = self.matching_rules(type_)
        if rules:
            LOGGER.debug("%s: %d rule(s) apply to %s", type(self).__name__, len(rules), type_.name)
        for rule in rules:
            fragments.extend(
                produce(type_, rule.target, lambda rule=rule: self.generate_for_rule(type_, rule))
            )
        return fragments

    def matching_rules(self, type_: MessageType) -> List[GenerationRule]:
        file_name = type_.declaring_file_name
        matching: List[GenerationRule] = []
        for rule in self.rules:
            if rule.is_blank():
                continue
            try:
                applies = self.custom_filter(type_, rule) and rule.pattern.matches(file_name)
            except GenerationError:
                raise
            except Exception as exc:
                raise GenerationError(type_.name, rule.target, exc) from exc
            if applies:
                matching.append(rule)
        return matching

    def custom_filter(self, type_: MessageType, rule: GenerationRule) -> bool:
        return rule.accepts(type_)

    @abstractmethod
    def generate_for_rule(self, type_: MessageType, rule: GenerationRule) -> Iterable[OutputFragment]:
        """Produce fragments for a rule that applies to ``type_``."""

    def generate_for_uuid(self, type_: MessageType) -> Iterable[OutputFragment]:
        return []


def produce(
    type_: Type, target: Optional[str], producer: Callable[[], Iterable[OutputFragment]]
) -> List[OutputFragment]:
    """Run ``producer`` and report its failure as a ``GenerationError``."""
    try:
        return list(producer())
    except GenerationError:
        raise
    except Exception as exc:
        raise GenerationError(type_.name, target, exc) from exc


__all__ = ["CodeGenerator", "GenerationError", "RuleGenerator", "produce"]
