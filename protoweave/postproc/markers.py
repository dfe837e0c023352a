"""Insertion point markers in generated Java sources.

protoc splices plugin contributions into files on its own. These helpers repeat
that step locally so a response can be previewed against host files on disk.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from ..logging import get_logger
from ..models import OutputFile
from .insertion import InsertionPoint

LOGGER = get_logger("markers")


class MissingInsertionPointError(LookupError):
    """Raised when a contribution targets a marker absent from its host file."""

    def __init__(self, file_name: str, insertion_point: str) -> None:
        super().__init__(f"File `{file_name}` has no insertion point `{insertion_point}`")
        self.file_name = file_name
        self.insertion_point = insertion_point


class MarkerScanner:
    """Finds and fills ``@@protoc_insertion_point(NAME)`` markers."""

    MARKER_RE = re.compile(r"@@protoc_insertion_point\(([^)]*)\)")

    def extract(self, source: str) -> List[str]:
        """Return insertion point names in order of first appearance."""
        names = (match.group(1) for match in self.MARKER_RE.finditer(source))
        return list(dict.fromkeys(names))

    def fill(self, source: str, contributions: Iterable[OutputFile], *, file_name: str = "") -> str:
        """Insert each contribution on the lines right above its marker.

        Inserted lines take the indentation of the marker line. Contributions for the
        same marker keep their order.
        """
        lines = source.splitlines(keepends=True)
        for contribution in contributions:
            point = contribution.insertion_point or ""
            marker = InsertionPoint.marker(point)
            index = next((i for i, line in enumerate(lines) if marker in line), None)
            if index is None:
                raise MissingInsertionPointError(file_name or contribution.name, point)
            marker_line = lines[index]
            indent = marker_line[: len(marker_line) - len(marker_line.lstrip())]
            lines[index:index] = _indented(contribution.content, indent)
        return "".join(lines)


def fill_directory(root: Path, files: Iterable[OutputFile]) -> List[Path]:
    """Apply merged response files under ``root`` the way protoc would.

    Whole files are written first; contributions are then spliced into files that
    already exist under ``root``.
    """
    scanner = MarkerScanner()
    ordered = list(files)
    touched: List[Path] = []
    for file in ordered:
        if file.insertion_point:
            continue
        path = root / file.name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(file.content, encoding="utf-8")
        touched.append(path)

    grouped: dict[str, List[OutputFile]] = {}
    for file in ordered:
        if file.insertion_point:
            grouped.setdefault(file.name, []).append(file)
    for name, contributions in grouped.items():
        path = root / name
        if not path.exists():
            raise FileNotFoundError(f"Host file {path} does not exist")
        filled = scanner.fill(path.read_text(encoding="utf-8"), contributions, file_name=name)
        path.write_text(filled, encoding="utf-8")
        LOGGER.debug("Filled %d insertion point(s) in %s", len(contributions), name)
        if path not in touched:
            touched.append(path)
    return touched


def _indented(content: str, indent: str) -> List[str]:
    if not content:
        return []
    if not content.endswith("\n"):
        content += "\n"
    return [indent + line if line.strip() else line for line in content.splitlines(keepends=True)]


__all__ = ["MarkerScanner", "MissingInsertionPointError", "fill_directory"]
