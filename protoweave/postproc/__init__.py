"""Post-processing of generated fragments into protoc response files."""

from .insertion import InsertionPoint
from .markers import MarkerScanner, MissingInsertionPointError, fill_directory
from .merger import FileConflictError, merge

__all__ = [
    "FileConflictError",
    "InsertionPoint",
    "MarkerScanner",
    "MissingInsertionPointError",
    "fill_directory",
    "merge",
]
