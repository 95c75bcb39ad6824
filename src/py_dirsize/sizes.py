"""Size aggregation — nested directory totals and threshold queries.

A directory's *aggregate size* is the sum of every file beneath it, at
any depth.  Computing it naively per directory re-walks the same
subtrees over and over; worse, re-summing a flattened list of all
descendant totals counts every nested directory once per ancestor.

The aggregator avoids both with a single post-order walk:

    total(d) = sum(own file sizes) + sum(total(child) for each DIRECT child)

Each child's total is added to its parent exactly once, and the
child's own report entry is appended before the parent's.  The output
of ``all_sizes()`` is therefore in post-order: descendants first, then
the directory itself.

Two threshold queries sit on top of the per-directory totals:

- ``sum_at_most(cap)`` — the sum of every total that is ``<= cap``.
- ``smallest_at_least(minimum)`` — the smallest total that is
  ``>= minimum``.

Both bounds are inclusive.  The tree is read-only here, so every query
is a pure function of the tree and safe to repeat.
"""

from __future__ import annotations

from dataclasses import dataclass

from py_dirsize.fs.tree import DirectoryTree
from py_dirsize.logging import Logger, LogLevel

_SOURCE = "sizes"


class NoCandidateError(Exception):
    """Raise when a threshold query finds no qualifying directory."""


@dataclass(frozen=True)
class SizeEntry:
    """One directory's aggregate size.

    Attributes:
        name: The directory's own name (``/`` for the root).
        size: Total bytes of every file under the directory.
        node_id: The directory's handle in the tree.
        path: The directory's absolute path.

    """

    name: str
    size: int
    node_id: int = 0
    path: str = ""

    def as_tuple(self) -> tuple[str, int]:
        """Return the ``(name, size)`` pair."""
        return (self.name, self.size)

    def __str__(self) -> str:
        """Format as ``path size`` (falls back to the name)."""
        return f"{self.path or self.name} {self.size}"


class SizeAggregator:
    """Compute aggregate directory sizes over a built tree."""

    def __init__(self, tree: DirectoryTree, *, logger: Logger | None = None) -> None:
        """Create an aggregator for *tree*.

        Args:
            tree: A fully built tree (normally sealed).
            logger: Optional log buffer for summary events.

        """
        self._tree = tree
        self._logger = logger

    @property
    def tree(self) -> DirectoryTree:
        """Return the tree being aggregated."""
        return self._tree

    def total_size(self, node_id: int | None = None) -> int:
        """Return the total size of every file under a directory.

        Args:
            node_id: Directory handle; defaults to the root.

        """
        return self._walk(self._tree.root_id if node_id is None else node_id)[-1][1]

    def all_sizes(self, node_id: int | None = None) -> list[SizeEntry]:
        """Return one entry per directory under *node_id*, in post-order.

        The directory itself is included, last.

        Args:
            node_id: Directory handle; defaults to the root.

        """
        totals = self._walk(self._tree.root_id if node_id is None else node_id)
        return [
            SizeEntry(
                name=self._tree.directory(nid).name,
                size=total,
                node_id=nid,
                path=self._tree.path_of(nid),
            )
            for nid, total in totals
        ]

    def _walk(self, node_id: int) -> list[tuple[int, int]]:
        """Return ``(handle, total)`` for the subtree at *node_id*, post-order.

        Uses an explicit stack, so depth is bounded by memory rather than
        the interpreter's recursion limit.  Each stack frame holds the
        directory, the index of its next child, and its running total.
        """
        result: list[tuple[int, int]] = []
        stack: list[list[int]] = [[node_id, 0, self._own_size(node_id)]]
        while stack:
            frame = stack[-1]
            nid, next_child, total = frame
            subdirectories = self._tree.directory(nid).subdirectories
            if next_child < len(subdirectories):
                frame[1] += 1
                child = subdirectories[next_child]
                stack.append([child, 0, self._own_size(child)])
                continue
            stack.pop()
            result.append((nid, total))
            if stack:
                # a child's total reaches its parent exactly once
                stack[-1][2] += total
        return result

    def _own_size(self, node_id: int) -> int:
        return sum(self._tree.file(fid).size for fid in self._tree.directory(node_id).files)

    def sum_at_most(self, cap: int) -> int:
        """Return the sum of every directory total that is ``<= cap``."""
        result = sum(e.size for e in self.all_sizes() if e.size <= cap)
        self._log(f"Directories at most {cap}: total {result}")
        return result

    def smallest_at_least(self, minimum: int) -> SizeEntry:
        """Return the smallest directory whose total is ``>= minimum``.

        Ties go to the first directory in post-order.

        Raises:
            NoCandidateError: If no directory is that large.

        """
        candidates = [e for e in self.all_sizes() if e.size >= minimum]
        if not candidates:
            msg = f"No directory is at least {minimum} bytes"
            raise NoCandidateError(msg)
        best = min(candidates, key=lambda e: e.size)
        self._log(f"Smallest directory at least {minimum}: {best}")
        return best

    def space_to_free(self, capacity: int, required_free: int) -> int:
        """Return how many bytes must be deleted to reach *required_free*.

        ``required_free - (capacity - used)``.  Zero or less means the
        disk already has enough free space.
        """
        return required_free - (capacity - self.total_size())

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(LogLevel.INFO, message, source=_SOURCE)
