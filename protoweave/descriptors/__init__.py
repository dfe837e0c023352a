"""Raw file descriptors, file sets, and the descriptor linker."""

from .files import LinkedFile, RawFile, parse_descriptor_set, well_known_files
from .fileset import FileSet
from .linker import Linker, LinkResult, link

__all__ = [
    "FileSet",
    "LinkResult",
    "LinkedFile",
    "Linker",
    "RawFile",
    "link",
    "parse_descriptor_set",
    "well_known_files",
]
