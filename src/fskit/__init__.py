"""Filesystem, directory-tree and structured-document helpers."""

__version__ = "0.1.0"

# Export protocol interfaces and result types for type hints and dependency injection
from fskit.protocols import (
    ArrayDocumentStore,
    FileSystem,
    TreeOperations,
)
from fskit.types import Entry, EntryKind, ErrorKind, Failure, OpResult

__all__ = [
    "__version__",
    "ArrayDocumentStore",
    "Entry",
    "EntryKind",
    "ErrorKind",
    "Failure",
    "FileSystem",
    "OpResult",
    "TreeOperations",
]
