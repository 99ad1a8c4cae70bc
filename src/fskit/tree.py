"""Whole-subtree operations built on the leaf filesystem layer.

Traversals use an explicit work stack, so nesting depth is bounded by memory
rather than by the interpreter's recursion limit. Symlinked directories are
never descended into.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fskit import paths
from fskit.errors import FsError
from fskit.filesystem import RealFileSystem
from fskit.paths import ExtensionFilter
from fskit.protocols import FileSystem
from fskit.types import Entry, ErrorKind, Failure, OpResult

logger = logging.getLogger(__name__)


class TreeOperator:
    """Recursive directory operations with best-effort reporting.

    Follows Separate Use from Creation: constructor requires the filesystem.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(self, filesystem: FileSystem) -> None:
        """Initialize the tree operator.

        Args:
            filesystem: Leaf filesystem every operation is built from.
        """
        self.fs = filesystem

    @classmethod
    def create(cls, filesystem: FileSystem | None = None) -> TreeOperator:
        """Factory method for production instantiation.

        Args:
            filesystem: Optional filesystem (RealFileSystem if not provided).

        Returns:
            Configured TreeOperator instance.
        """
        return cls(filesystem=filesystem or RealFileSystem())

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_tree(self, path: Path, preserve_root: bool = False) -> OpResult[int]:
        """Delete a directory and everything below it.

        Children are removed before the directory holding them. Symlinks,
        including links to directories, are unlinked and never followed.

        Args:
            path: Directory to delete. A symlink to a directory is refused.
            preserve_root: Keep the emptied directory itself.

        Returns:
            OpResult with the number of entries removed. Sub-failures do not
            stop the traversal; they are reported as PARTIAL_FAILURE.
        """
        path = Path(path)
        problem = self._require_directory(path, follow_links=False)
        if problem is not None:
            return problem

        removed = 0
        failures: list[Failure] = []
        # (directory, children_done)
        stack: list[tuple[Path, bool]] = [(path, False)]

        while stack:
            directory, children_done = stack.pop()

            if children_done:
                if directory == path and preserve_root:
                    continue
                try:
                    self.fs.rmdir(directory)
                    removed += 1
                except FsError as e:
                    self._record(failures, directory, e)
                continue

            try:
                children = self.fs.list_children(directory)
            except FsError as e:
                self._record(failures, directory, e)
                continue

            stack.append((directory, True))
            subdirectories = []
            for child in children:
                if child.is_dir:
                    subdirectories.append(child.path)
                elif self._delete_entry(child, failures):
                    removed += 1
            stack.extend((sub, False) for sub in reversed(subdirectories))

        logger.debug("Deleted %d entries under %s", removed, path)
        return OpResult.collect(path, removed, failures)

    def delete_subdirectories(self, path: Path) -> OpResult[int]:
        """Delete every real subdirectory of path, leaving files in place."""
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem

        removed = 0
        failures: list[Failure] = []
        for child in self._children(path, failures):
            if child.is_dir:
                removed += self._absorb(self.delete_tree(child.path), failures)
        return OpResult.collect(path, removed, failures)

    def delete_files(self, path: Path, extensions: ExtensionFilter = None) -> OpResult[int]:
        """Delete the files and symlinks directly inside path.

        Args:
            path: Directory to clean.
            extensions: Optional allow-list; only matching names are deleted.

        Returns:
            OpResult with the number of entries deleted.
        """
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem

        allowed = paths.normalize_extensions(extensions)
        removed = 0
        failures: list[Failure] = []
        for child in self._children(path, failures):
            if child.is_dir or not paths.matches_extensions(child.name, allowed):
                continue
            if self._delete_entry(child, failures):
                removed += 1
        return OpResult.collect(path, removed, failures)

    def empty_directory(self, path: Path, extensions: ExtensionFilter = None) -> OpResult[int]:
        """Delete the files, then the subdirectories, of path.

        The two steps are not atomic: an interruption in between leaves the
        files gone and the subdirectories intact.
        """
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem

        failures: list[Failure] = []
        removed = self._absorb(self.delete_files(path, extensions), failures)
        removed += self._absorb(self.delete_subdirectories(path), failures)
        return OpResult.collect(path, removed, failures)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def list_entries(
        self, path: Path, full_path: bool = False, extensions: ExtensionFilter = None
    ) -> OpResult[list[str]]:
        """List the immediate children of a directory.

        Args:
            path: Directory to list.
            full_path: Return full paths instead of names.
            extensions: Optional allow-list of extensions ("txt" or [".txt", "csv"]).

        Returns:
            OpResult with the names in listing order. An empty list means the
            directory has no matching entry.
        """
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem

        allowed = paths.normalize_extensions(extensions)
        try:
            children = self.fs.list_children(path)
        except FsError as e:
            return self._fail(path, e)

        names = [
            self._display(child, full_path)
            for child in children
            if paths.matches_extensions(child.name, allowed)
        ]
        return OpResult.ok(path, names)

    def list_directories(self, path: Path, full_path: bool = False) -> OpResult[list[str]]:
        """List the immediate real subdirectories of a directory."""
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem

        try:
            children = self.fs.list_children(path)
        except FsError as e:
            return self._fail(path, e)
        return OpResult.ok(
            path, [self._display(child, full_path) for child in children if child.is_dir]
        )

    def scan(self, path: Path) -> OpResult[list[Entry]]:
        """Return the immediate children of a directory as entries."""
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem
        try:
            return OpResult.ok(path, self.fs.list_children(path))
        except FsError as e:
            return self._fail(path, e)

    def has_entries(self, path: Path) -> OpResult[bool]:
        """Check whether a directory has at least one child."""
        result = self.scan(path)
        if not result:
            return OpResult.fail(result.path, result.error, result.message)
        return OpResult.ok(result.path, bool(result.value))

    def is_private(self, path: Path) -> OpResult[bool]:
        """Check whether a directory's name marks it as private (contains a dot)."""
        path = Path(path)
        problem = self._require_directory(path)
        if problem is not None:
            return problem
        return OpResult.ok(path, paths.is_hidden_name(paths.basename(path)))

    # ------------------------------------------------------------------
    # Copy, create, rename
    # ------------------------------------------------------------------

    def copy_tree(self, source: Path, destination: Path) -> OpResult[int]:
        """Copy a directory tree.

        Directories are created before their content. Symlinks are re-created
        as links to the same target and never followed. When the destination
        lies inside the source it is not copied into itself.

        Args:
            source: Directory to copy.
            destination: Target directory, created if absent.

        Returns:
            OpResult with the number of entries copied below the destination.
        """
        source = Path(source)
        destination = Path(destination)
        problem = self._require_directory(source)
        if problem is not None:
            return problem

        destination_root = destination.resolve()
        copied = 0
        failures: list[Failure] = []
        stack: list[tuple[Path, Path]] = [(source, destination)]

        while stack:
            src, dst = stack.pop()

            if not self.fs.is_dir(dst):
                try:
                    self.fs.mkdir(dst)
                except FsError as e:
                    self._record(failures, dst, e)
                    continue
                if src != source:
                    copied += 1

            try:
                children = self.fs.list_children(src)
            except FsError as e:
                self._record(failures, src, e)
                continue

            subdirectories = []
            for child in children:
                target = dst / child.name
                if child.is_dir:
                    if child.path.resolve() == destination_root:
                        logger.debug("Skipping destination inside source: %s", child.path)
                        continue
                    subdirectories.append((child.path, target))
                    continue
                try:
                    if child.is_symlink:
                        link_target = self.fs.readlink(child.path)
                        self.fs.delete(target)
                        self.fs.symlink(link_target, target)
                    else:
                        self.fs.copy_file(child.path, target)
                    copied += 1
                except FsError as e:
                    self._record(failures, child.path, e)
            stack.extend(reversed(subdirectories))

        logger.debug("Copied %d entries from %s to %s", copied, source, destination)
        return OpResult.collect(destination, copied, failures)

    def make_directory(
        self,
        path: Path,
        mode: int | None = None,
        parents: bool = False,
        exist_ok: bool = False,
    ) -> OpResult[bool]:
        """Create a directory."""
        path = Path(path)
        try:
            self.fs.mkdir(path, mode=mode, parents=parents, exist_ok=exist_ok)
        except FsError as e:
            return self._fail(path, e)
        return OpResult.ok(path, True)

    def rename(self, old: Path, new: Path) -> OpResult[bool]:
        """Rename a directory (or any path) with a single rename call."""
        old = Path(old)
        try:
            self.fs.rename(old, Path(new))
        except FsError as e:
            return self._fail(old, e)
        return OpResult.ok(Path(new), True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_directory(self, path: Path, follow_links: bool = True) -> OpResult | None:
        """Return a failed result unless path is a directory."""
        if not self.fs.exists(path):
            return OpResult.fail(path, ErrorKind.NOT_FOUND, f"No such directory: {path}")
        if not self.fs.is_dir(path) or (not follow_links and self.fs.is_symlink(path)):
            return OpResult.fail(path, ErrorKind.NOT_A_DIRECTORY, f"Not a directory: {path}")
        return None

    def _children(self, path: Path, failures: list[Failure]) -> list[Entry]:
        try:
            return self.fs.list_children(path)
        except FsError as e:
            self._record(failures, path, e)
            return []

    def _delete_entry(self, entry: Entry, failures: list[Failure]) -> bool:
        try:
            return self.fs.delete(entry.path)
        except FsError as e:
            self._record(failures, entry.path, e)
            return False

    def _absorb(self, result: OpResult[int], failures: list[Failure]) -> int:
        """Fold a nested result into the caller's failure list."""
        if result.failures:
            failures.extend(result.failures)
        elif not result:
            failures.append(Failure(result.path, result.error, result.message or ""))
        return result.value or 0

    @staticmethod
    def _record(failures: list[Failure], path: Path, error: FsError) -> None:
        logger.warning("Skipping %s: %s", path, error)
        failures.append(Failure(path, error.kind, str(error)))

    @staticmethod
    def _fail(path: Path, error: FsError) -> OpResult:
        logger.debug("Operation on %s failed: %s", path, error)
        return OpResult.from_error(path, error)

    @staticmethod
    def _display(entry: Entry, full_path: bool) -> str:
        return str(entry.path) if full_path else entry.name
