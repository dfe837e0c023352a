"""Folds the fragments of every generator into response files."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from ..logging import get_logger
from ..models import OutputFile, OutputFragment

LOGGER = get_logger("merger")


class FileConflictError(ValueError):
    """Raised when two whole files share a name but not their content."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"Generators produced different content for file `{file_name}`")
        self.file_name = file_name


def merge(fragments: Iterable[OutputFragment]) -> List[OutputFile]:
    """Merge fragments into the files of a plugin response.

    Contributions sharing a file and an insertion point are joined into a single
    entry, their content concatenated in the order the fragments arrive. Groups
    keep the order in which they were first seen. Identical whole files collapse
    into one.

    Raises:
        FileConflictError: if two whole files with the same name differ in content.
    """
    contributions: Dict[Tuple[str, str], List[str]] = {}
    whole_files: Dict[str, str] = {}
    for fragment in fragments:
        if fragment.is_whole_file:
            existing = whole_files.get(fragment.name)
            if existing is None:
                whole_files[fragment.name] = fragment.content
            elif existing != fragment.content:
                raise FileConflictError(fragment.name)
            continue
        key = (fragment.name, fragment.insertion_point or "")
        contributions.setdefault(key, []).append(fragment.content)

    merged = [
        OutputFile(name=name, content="".join(parts), insertion_point=point)
        for (name, point), parts in contributions.items()
    ]
    merged.extend(OutputFile(name=name, content=content) for name, content in whole_files.items())
    LOGGER.debug(
        "Merged fragments into %d insertion(s) and %d file(s)", len(contributions), len(whole_files)
    )
    return merged


__all__ = ["FileConflictError", "merge"]
