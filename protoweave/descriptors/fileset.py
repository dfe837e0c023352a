"""A set of linked files addressed by file name."""

from __future__ import annotations

from typing import Collection, Dict, Iterable, Iterator, List, Optional

from .files import LinkedFile


class FileSet:
    """Linked files keyed by their proto file name, in insertion order."""

    def __init__(self, files: Iterable[LinkedFile] = ()) -> None:
        self._files: Dict[str, LinkedFile] = {}
        for file in files:
            self._files.setdefault(file.name, file)

    def add(self, file: LinkedFile) -> bool:
        """Add ``file`` unless a file with the same name is present; return True if added."""
        if file.name in self._files:
            return False
        self._files[file.name] = file
        return True

    def contains(self, name: str) -> bool:
        return name in self._files

    def contains_all(self, names: Collection[str]) -> bool:
        return all(name in self._files for name in names)

    def try_find(self, name: str) -> Optional[LinkedFile]:
        return self._files.get(name)

    def find(self, names: Iterable[str]) -> "FileSet":
        """Return the subset of files whose names are listed in ``names``."""
        found = (self._files[name] for name in names if name in self._files)
        return FileSet(found)

    def union(self, other: "FileSet") -> "FileSet":
        if not other:
            return self
        if not self:
            return other
        return FileSet([*self._files.values(), *other._files.values()])

    def files(self) -> List[LinkedFile]:
        return list(self._files.values())

    def file_names(self) -> List[str]:
        """Return alphabetically sorted file names."""
        return sorted(self._files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __iter__(self) -> Iterator[LinkedFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileSet):
            return NotImplemented
        return self._files == other._files

    def __repr__(self) -> str:
        return f"FileSet(files={self.file_names()})"


__all__ = ["FileSet"]
