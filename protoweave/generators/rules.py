"""Generation rules and the file patterns that select them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..types.model import Type


class PatternCase(str, Enum):
    SUFFIX = "suffix"
    PREFIX = "prefix"
    REGEX = "regex"
    VALUE_NOT_SET = "value_not_set"


@dataclass(frozen=True)
class FilePattern:
    """A one-of predicate over proto file names.

    At most one of ``suffix``, ``prefix`` and ``regex`` may be set. A pattern with
    nothing set never matches.
    """

    suffix: Optional[str] = None
    prefix: Optional[str] = None
    regex: Optional[str] = None

    def __post_init__(self) -> None:
        set_values = [value for value in (self.suffix, self.prefix, self.regex) if value is not None]
        if len(set_values) > 1:
            raise ValueError("A file pattern sets exactly one of suffix, prefix or regex")

    @classmethod
    def of_suffix(cls, suffix: str) -> "FilePattern":
        return cls(suffix=suffix)

    @classmethod
    def of_prefix(cls, prefix: str) -> "FilePattern":
        return cls(prefix=prefix)

    @classmethod
    def of_regex(cls, regex: str) -> "FilePattern":
        return cls(regex=regex)

    @property
    def case(self) -> PatternCase:
        if self.suffix is not None:
            return PatternCase.SUFFIX
        if self.prefix is not None:
            return PatternCase.PREFIX
        if self.regex is not None:
            return PatternCase.REGEX
        return PatternCase.VALUE_NOT_SET

    def matches(self, file_name: str) -> bool:
        case = self.case
        if case is PatternCase.SUFFIX:
            return file_name.endswith(self.suffix or "")
        if case is PatternCase.PREFIX:
            return file_name.startswith(self.prefix or "")
        if case is PatternCase.REGEX:
            return re.fullmatch(self.regex or "", file_name) is not None
        return False

    def __str__(self) -> str:
        case = self.case
        if case is PatternCase.VALUE_NOT_SET:
            return "<unset>"
        return f"{case.value}={getattr(self, case.value)!r}"


@dataclass(frozen=True)
class GenerationRule:
    """Applies ``target`` to the types declared in files matching ``pattern``.

    The meaning of ``target`` belongs to the generator owning the rule: an interface
    name, a factory name, and so on. ``predicate`` narrows the rule further.
    """

    pattern: FilePattern = field(default_factory=FilePattern)
    target: str = ""
    generate: bool = False
    predicate: Optional[Callable[["Type"], bool]] = field(default=None, compare=False)

    def is_blank(self) -> bool:
        return not self.target or not self.target.strip()

    def accepts(self, type_: "Type") -> bool:
        return self.predicate is None or bool(self.predicate(type_))


__all__ = ["FilePattern", "GenerationRule", "PatternCase"]
