"""Code generators and their assembly from configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Set

from ..types.options import OptionIndex
from .base import CodeGenerator, GenerationError, RuleGenerator
from .builders import BuilderGenerator
from .composite import CompositeGenerator
from .interfaces import InterfaceGenerator
from .methods import MethodGenerator
from .nested import NestedClassGenerator
from .rendering import TemplateRenderer
from .rules import FilePattern, GenerationRule, PatternCase

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..config import ProtoweaveConfig


@dataclass
class GeneratorContext:
    """Per-request inputs generators need beyond the configuration."""

    option_index: OptionIndex = field(default_factory=OptionIndex)
    renderer: Optional[TemplateRenderer] = None


def _interfaces(config: "ProtoweaveConfig", context: GeneratorContext) -> CodeGenerator:
    return InterfaceGenerator(
        config.interfaces,
        uuid_interface=config.uuids.interface,
        is_option=config.options.is_option,
        every_is_option=config.options.every_is_option,
        option_index=context.option_index,
        renderer=context.renderer,
    )


def _methods(config: "ProtoweaveConfig", context: GeneratorContext) -> CodeGenerator:
    return MethodGenerator(
        config.methods, uuid_factories=config.uuids.methods, renderer=context.renderer
    )


def _nested_classes(config: "ProtoweaveConfig", context: GeneratorContext) -> CodeGenerator:
    return NestedClassGenerator(config.nested_classes, renderer=context.renderer)


def _builders(config: "ProtoweaveConfig", context: GeneratorContext) -> CodeGenerator:
    return BuilderGenerator(config.builders)


_BUILTIN_FACTORIES: Dict[str, Callable[["ProtoweaveConfig", GeneratorContext], CodeGenerator]] = {
    "interfaces": _interfaces,
    "methods": _methods,
    "nested_classes": _nested_classes,
    "builders": _builders,
}


def build_generator(
    config: "ProtoweaveConfig", context: Optional[GeneratorContext] = None
) -> CompositeGenerator:
    """Return the composite of the generators enabled in ``config``."""
    context = context or GeneratorContext()
    if context.renderer is None:
        context.renderer = TemplateRenderer(config.templates_dir)

    enabled_set: Optional[Set[str]] = None
    if config.generators.enabled is not None:
        enabled_set = {name.lower() for name in config.generators.enabled}
        unknown = enabled_set - set(_BUILTIN_FACTORIES)
        if unknown:
            raise ValueError(f"Unknown generators requested: {', '.join(sorted(unknown))}")

    generators: List[CodeGenerator] = [
        factory(config, context)
        for name, factory in _BUILTIN_FACTORIES.items()
        if enabled_set is None or name in enabled_set
    ]
    return CompositeGenerator(generators)


__all__ = [
    "BuilderGenerator",
    "CodeGenerator",
    "CompositeGenerator",
    "FilePattern",
    "GenerationError",
    "GenerationRule",
    "GeneratorContext",
    "InterfaceGenerator",
    "MethodGenerator",
    "NestedClassGenerator",
    "PatternCase",
    "RuleGenerator",
    "TemplateRenderer",
    "build_generator",
]
