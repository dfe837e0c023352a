"""Makes generated message classes implement Java interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..models import OutputFragment
from ..postproc.insertion import InsertionPoint
from ..types.model import MessageType, Type
from ..types.options import FILE_OPTIONS, MESSAGE_OPTIONS, OptionIndex, find_string_option
from .base import RuleGenerator, produce
from .rendering import TemplateRenderer
from .rules import GenerationRule

PACKAGE_SEPARATOR = "."


@dataclass(frozen=True)
class InterfaceSpec:
    """A Java interface given by its package and simple name."""

    package: str
    name: str

    @classmethod
    def parse(cls, value: str, default_package: str) -> "InterfaceSpec":
        """Parse a qualified name; a simple name is placed into ``default_package``."""
        value = value.strip()
        if PACKAGE_SEPARATOR in value:
            package, _, name = value.rpartition(PACKAGE_SEPARATOR)
            return cls(package, name)
        return cls(default_package, value)

    @property
    def qualified_name(self) -> str:
        return PACKAGE_SEPARATOR.join(part for part in (self.package, self.name) if part)

    @property
    def file_name(self) -> str:
        return self.qualified_name.replace(PACKAGE_SEPARATOR, "/") + ".java"


def implement(type_: Type, interface: str) -> OutputFragment:
    """A contribution adding ``interface`` to the implemented interfaces of ``type_``."""
    return InsertionPoint.MESSAGE_IMPLEMENTS.contribution(type_, f"{interface},")


class InterfaceGenerator(RuleGenerator):
    """Adds interfaces named by rules, the ``(is)`` and the ``(every_is)`` options.

    A UUID value message implements the configured UUID interface parameterised
    with the message class.
    """

    name = "interfaces"

    def __init__(
        self,
        rules: Sequence[GenerationRule] = (),
        *,
        uuid_interface: Optional[str] = None,
        is_option: str = "spine.is",
        every_is_option: str = "spine.every_is",
        option_index: Optional[OptionIndex] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        super().__init__(rules)
        self.uuid_interface = uuid_interface
        self.is_option = is_option
        self.every_is_option = every_is_option
        self.option_index = option_index or OptionIndex()
        self.renderer = renderer or TemplateRenderer()

    def generate(self, type_: Type) -> List[OutputFragment]:
        fragments = super().generate(type_)
        if isinstance(type_, MessageType):
            fragments.extend(produce(type_, None, lambda: self._from_options(type_)))
        return fragments

    def generate_for_rule(self, type_: MessageType, rule: GenerationRule) -> Iterable[OutputFragment]:
        interface = InterfaceSpec.parse(rule.target, type_.java_package)
        yield implement(type_, interface.qualified_name)
        if rule.generate:
            yield self.declare(interface)

    def generate_for_uuid(self, type_: MessageType) -> Iterable[OutputFragment]:
        if not self.uuid_interface or not self.uuid_interface.strip():
            return []
        return [implement(type_, f"{self.uuid_interface.strip()}<{type_.simple_name}>")]

    def declare(self, interface: InterfaceSpec) -> OutputFragment:
        content = self.renderer.render(
            "interface.java.j2", package=interface.package, name=interface.name
        )
        return OutputFragment(name=interface.file_name, content=content)

    def _from_options(self, type_: MessageType) -> List[OutputFragment]:
        # The message option takes precedence over the file-wide one.
        value = find_string_option(
            type_.proto.options, MESSAGE_OPTIONS, self.is_option, self.option_index
        )
        if not value:
            value = find_string_option(
                type_.file.options, FILE_OPTIONS, self.every_is_option, self.option_index
            )
        if not value or not value.strip():
            return []
        interface = InterfaceSpec.parse(value, type_.java_package)
        return [implement(type_, interface.qualified_name), self.declare(interface)]


__all__ = ["InterfaceGenerator", "InterfaceSpec", "implement"]
