"""Arena-backed directory tree rebuilt from a shell transcript.

The tree mirrors the inode table of a real file system:

- **Arena**: every node lives in one flat table keyed by a stable
  integer handle (``node_id``).  The tree owns the table; nodes refer
  to each other by handle, never by object reference.

- **Directory node**: holds its name, the handle of its parent, and
  ordered lists of child handles (subdirectories and files, each in
  discovery order).

- **File node**: holds its name, its size in bytes, and the handle of
  the directory that contains it.

Downward edges (children) and the upward edge (parent) are both a
plain dict lookup.  Parent handles are only used to climb; walking
"down" only ever follows child lists.

The tree is build-once: a builder appends nodes while it reads the
transcript, then calls ``seal()``.  After that every mutation raises
``TreeSealedError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from itertools import count

ROOT_NAME = "/"

_INDENT = "  "


class TreeSealedError(Exception):
    """Raise when a sealed tree is asked to grow."""


@dataclass
class DirectoryNode:
    """A directory in the arena.

    ``parent`` is ``None`` only for the root.  The child lists hold
    handles, in the order the entries were discovered.
    """

    node_id: int
    name: str
    parent: int | None = None
    subdirectories: list[int] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    files: list[int] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    @property
    def is_root(self) -> bool:
        """Return True if this directory has no parent."""
        return self.parent is None


@dataclass(frozen=True)
class FileNode:
    """A file in the arena; immutable once created."""

    node_id: int
    name: str
    size: int
    parent: int


class DirectoryTree:
    """A rooted tree of directories and files addressed by handle.

    The tree is initialised with a root directory named ``/`` at
    handle 0.  Handles are allocated per tree, so two trees never
    interfere with each other.
    """

    def __init__(self) -> None:
        """Create a tree holding only the root directory."""
        self._ids = count(start=0)
        root = DirectoryNode(node_id=next(self._ids), name=ROOT_NAME)
        self._directories: dict[int, DirectoryNode] = {root.node_id: root}
        self._files: dict[int, FileNode] = {}
        self._root_id: int = root.node_id
        self._sealed = False

    # -- Lookup -----------------------------------------------------------

    @property
    def root_id(self) -> int:
        """Return the handle of the root directory."""
        return self._root_id

    @property
    def root(self) -> DirectoryNode:
        """Return the root directory node."""
        return self._directories[self._root_id]

    @property
    def sealed(self) -> bool:
        """Return True once the tree has been sealed."""
        return self._sealed

    def directory(self, node_id: int) -> DirectoryNode:
        """Return the directory with the given handle.

        Raises:
            KeyError: If no directory has that handle.

        """
        try:
            return self._directories[node_id]
        except KeyError:
            msg = f"No directory with handle {node_id}"
            raise KeyError(msg) from None

    def file(self, node_id: int) -> FileNode:
        """Return the file with the given handle.

        Raises:
            KeyError: If no file has that handle.

        """
        try:
            return self._files[node_id]
        except KeyError:
            msg = f"No file with handle {node_id}"
            raise KeyError(msg) from None

    def is_directory(self, node_id: int) -> bool:
        """Check whether a handle refers to a directory."""
        return node_id in self._directories

    def find_subdirectory(self, parent_id: int, name: str) -> int | None:
        """Return the first subdirectory of *parent_id* called *name*, or None.

        Names are expected to be unique among siblings, but nothing
        enforces it.  The first match in discovery order wins.
        """
        parent = self.directory(parent_id)
        return next(
            (sd for sd in parent.subdirectories if self._directories[sd].name == name),
            None,
        )

    def parent_of(self, node_id: int) -> int | None:
        """Return the parent handle of a directory or file (None for the root)."""
        if node_id in self._files:
            return self._files[node_id].parent
        return self.directory(node_id).parent

    def depth(self, node_id: int) -> int:
        """Return the number of parent hops from *node_id* up to the root."""
        hops = 0
        parent = self.parent_of(node_id)
        while parent is not None:
            hops += 1
            parent = self._directories[parent].parent
        return hops

    def path_of(self, node_id: int) -> str:
        """Return the absolute path of a node.

        Examples::

            root        → "/"
            a under /   → "/a"
            e under /a  → "/a/e"

        """
        parts: list[str] = []
        current: int | None = node_id
        while current is not None and current != self._root_id:
            node = self._files.get(current) or self._directories[current]
            parts.append(node.name)
            current = node.parent
        return "/" + "/".join(reversed(parts))

    def iter_directories(self, node_id: int | None = None) -> Iterator[int]:
        """Yield every directory handle under *node_id*, pre-order.

        Defaults to the whole tree.  Only child lists are followed.
        """
        stack = [self._root_id if node_id is None else node_id]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._directories[current].subdirectories))

    def __len__(self) -> int:
        """Return the number of nodes (directories and files)."""
        return len(self._directories) + len(self._files)

    # -- Construction -----------------------------------------------------

    def add_directory(self, parent_id: int, name: str) -> int:
        """Create a directory under *parent_id* and return its handle.

        Raises:
            TreeSealedError: If the tree has been sealed.
            KeyError: If *parent_id* is not a directory.

        """
        parent = self._open_parent(parent_id)
        node = DirectoryNode(node_id=next(self._ids), name=name, parent=parent_id)
        self._directories[node.node_id] = node
        parent.subdirectories.append(node.node_id)
        return node.node_id

    def add_file(self, parent_id: int, name: str, size: int) -> int:
        """Create a file of *size* bytes under *parent_id* and return its handle.

        Raises:
            TreeSealedError: If the tree has been sealed.
            KeyError: If *parent_id* is not a directory.
            ValueError: If *size* is negative.

        """
        if size < 0:
            msg = f"File size must be non-negative: {name} ({size})"
            raise ValueError(msg)
        parent = self._open_parent(parent_id)
        node = FileNode(node_id=next(self._ids), name=name, size=size, parent=parent_id)
        self._files[node.node_id] = node
        parent.files.append(node.node_id)
        return node.node_id

    def seal(self) -> None:
        """Freeze the tree; later ``add_*`` calls raise TreeSealedError."""
        self._sealed = True

    def _open_parent(self, parent_id: int) -> DirectoryNode:
        if self._sealed:
            msg = "Tree is sealed; no further entries can be added"
            raise TreeSealedError(msg)
        return self.directory(parent_id)

    # -- Display ----------------------------------------------------------

    def render(self) -> str:
        """Return an indented dump of the tree, one line per node.

        Directories list their subdirectories first, then their files::

            - / (dir)
              - a (dir)
                - i (file, size=584)
              - b.txt (file, size=14848514)

        """
        lines: list[str] = []
        # (level, handle, is_directory); files are pushed below subdirectories
        stack: list[tuple[int, int, bool]] = [(0, self._root_id, True)]
        while stack:
            level, node_id, is_directory = stack.pop()
            if not is_directory:
                f = self._files[node_id]
                lines.append(f"{_INDENT * level}- {f.name} (file, size={f.size})")
                continue
            directory = self._directories[node_id]
            lines.append(f"{_INDENT * level}- {directory.name} (dir)")
            stack.extend((level + 1, fid, False) for fid in reversed(directory.files))
            stack.extend((level + 1, sd, True) for sd in reversed(directory.subdirectories))
        return "\n".join(lines)
