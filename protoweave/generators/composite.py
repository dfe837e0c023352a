"""Fan-out of one type to several independent generators."""

from __future__ import annotations

from typing import Iterable, List

from ..models import OutputFragment
from ..types.model import Type
from .base import CodeGenerator


class CompositeGenerator(CodeGenerator):
    """Concatenates the fragments every sub-generator produces for a type."""

    name = "composite"

    def __init__(self, generators: Iterable[CodeGenerator]) -> None:
        self.generators = tuple(generators)

    def generate(self, type_: Type) -> List[OutputFragment]:
        fragments: List[OutputFragment] = []
        for generator in self.generators:
            fragments.extend(generator.generate(type_))
        return fragments

    def __len__(self) -> int:
        return len(self.generators)


__all__ = ["CompositeGenerator"]
