"""Links raw file descriptors into a graph of resolved files.

Descriptor sets do not have to list files in dependency order, so linking runs
repeated passes over the remaining files until a pass resolves nothing new.
Files that never resolve are reported through the ``partially_resolved`` and
``unresolved`` views rather than raised as errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from ..logging import get_logger
from .files import LinkedFile, RawFile, well_known_files
from .fileset import FileSet

LOGGER = get_logger("linker")


@dataclass(frozen=True)
class LinkResult:
    """Outcome of linking a collection of raw files."""

    resolved: FileSet
    partially_resolved: FileSet
    unresolved: FileSet
    remaining: Tuple[RawFile, ...] = ()

    def all_files(self) -> FileSet:
        return self.resolved.union(self.partially_resolved).union(self.unresolved)

    def is_complete(self) -> bool:
        return not self.partially_resolved and not self.unresolved and not self.remaining


class Linker:
    """Resolves dependency names of raw files against already linked files."""

    def __init__(self, files: Iterable[RawFile], seed: Optional[FileSet] = None) -> None:
        self._input: List[RawFile] = list(files)
        self._remaining: List[RawFile] = []
        seen: set[str] = set()
        for file in self._input:
            if file.name in seen:
                LOGGER.warning("Duplicate descriptor for %s ignored", file.name)
                continue
            seen.add(file.name)
            self._remaining.append(file)
        self._seed = seed if seed is not None else default_seed()
        self._resolved = FileSet()
        self._partially_resolved = FileSet()
        self._unresolved = FileSet()
        self._done = False

    def resolve(self) -> None:
        """Classify every input file; may only run once per linker."""
        if self._done:
            raise RuntimeError("Linker.resolve() has already been called")
        self._done = True
        self._find_resolved()
        self._find_partially_resolved()
        self._add_unresolved()

    def remaining(self) -> Tuple[RawFile, ...]:
        return tuple(self._remaining)

    def resolved(self) -> FileSet:
        return self._resolved

    def partially_resolved(self) -> FileSet:
        return self._partially_resolved

    def unresolved(self) -> FileSet:
        return self._unresolved

    def result(self) -> LinkResult:
        return LinkResult(
            resolved=self._resolved,
            partially_resolved=self._partially_resolved,
            unresolved=self._unresolved,
            remaining=self.remaining(),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _find_resolved(self) -> None:
        progress = True
        while self._remaining and progress:
            progress = self._resolve_pass()

    def _resolve_pass(self) -> bool:
        found = False
        still_remaining: List[RawFile] = []
        for file in self._remaining:
            dependencies = [self._lookup_resolved(name) for name in file.dependency]
            if all(dependency is not None for dependency in dependencies):
                self._resolved.add(LinkedFile(file, tuple(dependencies)))  # type: ignore[arg-type]
                found = True
            else:
                still_remaining.append(file)
        self._remaining = still_remaining
        return found

    def _find_partially_resolved(self) -> None:
        progress = True
        while self._remaining and progress:
            progress = False
            still_remaining: List[RawFile] = []
            for file in self._remaining:
                found, missing = self._split_dependencies(file.dependency)
                if found:
                    self._partially_resolved.add(LinkedFile(file, found, missing))
                    progress = True
                else:
                    still_remaining.append(file)
            self._remaining = still_remaining

    def _add_unresolved(self) -> None:
        # Files left here might resolve against each other, but a group that is cut
        # off from every known file is of no use for code generation.
        for file in self._remaining:
            self._unresolved.add(LinkedFile(file, (), tuple(file.dependency)))
        self._remaining = []

    def _lookup_resolved(self, name: str) -> Optional[LinkedFile]:
        return self._resolved.try_find(name) or self._seed.try_find(name)

    def _split_dependencies(
        self, names: Sequence[str]
    ) -> Tuple[Tuple[LinkedFile, ...], Tuple[str, ...]]:
        found: List[LinkedFile] = []
        missing: List[str] = []
        for name in names:
            dependency = self._lookup_resolved(name) or self._partially_resolved.try_find(name)
            if dependency is None:
                missing.append(name)
            else:
                found.append(dependency)
        return tuple(found), tuple(missing)

    def __repr__(self) -> str:
        return (
            f"Linker(input={sorted(file.name for file in self._input)}, "
            f"remaining={sorted(file.name for file in self._remaining)}, "
            f"resolved={self._resolved!r}, "
            f"partially_resolved={self._partially_resolved!r}, "
            f"unresolved={self._unresolved!r})"
        )


@lru_cache(maxsize=1)
def _linked_well_known() -> Tuple[LinkedFile, ...]:
    linker = Linker(well_known_files(), seed=FileSet())
    linker.resolve()
    return tuple(linker.resolved())


def default_seed() -> FileSet:
    """Well-known files linked among themselves, used as pre-resolved dependencies.

    Each call returns a new set, so adding to it never leaks into other callers.
    """
    return FileSet(_linked_well_known())


def link(files: Iterable[RawFile], seed: Optional[FileSet] = None) -> LinkResult:
    """Link ``files`` and return the classified result."""
    linker = Linker(files, seed=seed)
    LOGGER.debug("Trying to link %d files", len(linker.remaining()))
    linker.resolve()
    result = linker.result()
    LOGGER.debug(
        "Linking complete: %d resolved, %d partially resolved, %d unresolved",
        len(result.resolved),
        len(result.partially_resolved),
        len(result.unresolved),
    )
    return result


__all__ = ["LinkResult", "Linker", "default_seed", "link"]
