"""Transcript replay — rebuild a directory tree from a shell session log.

A transcript is what a terminal shows while someone explores a disk::

    $ cd /
    $ ls
    dir a
    14848514 b.txt
    $ cd a
    $ ls
    584 i

Every line is one of three kinds, told apart by its first token:

1. **Command** (``$ cd <target>`` or ``$ ls``) — moves the cursor or
   announces a listing.
2. **Directory entry** (``dir <name>``) — a subdirectory of the cursor.
3. **File entry** (``<size> <name>``) — a file in the cursor.

The builder replays the lines in order, keeping a *cursor*: the
directory the session is currently "in".  Entries are attached under
the cursor; ``cd`` moves it.  Because every line depends on where the
previous lines left the cursor, one bad line poisons everything after
it, so every error aborts the whole build.

Rules:
    - Commands are dispatched through a dict of handlers.
    - ``cd`` never creates directories.  Only ``dir`` entries do, so
      a ``cd`` into an undeclared name is a ``NavigationError``.
    - ``build()`` returns the tree, not the final cursor.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import NoReturn, TypeAlias

from py_dirsize.fs.tree import DirectoryTree
from py_dirsize.logging import Logger, LogLevel

COMMAND_MARKER = "$"
DIRECTORY_MARKER = "dir"

_SOURCE = "builder"

# A command handler takes the optional argument and the line number.
_Handler: TypeAlias = Callable[[str | None, int], None]


class ParseError(Exception):
    """Raise when a transcript line cannot be understood."""


class NavigationError(Exception):
    """Raise when ``cd`` points somewhere the tree does not have."""


class LineKind(StrEnum):
    """The three kinds of transcript line."""

    COMMAND = "command"
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class TranscriptLine:
    """A transcript line split into its leading token and the rest.

    Attributes:
        kind: Which of the three line kinds this is.
        prefix: The first token (``$``, ``dir``, or a size).
        remainder: Everything after the first space.

    """

    kind: LineKind
    prefix: str
    remainder: str


def classify_line(text: str, *, line_number: int = 0) -> TranscriptLine:
    """Split a line on its first space and decide what kind it is.

    Raises:
        ParseError: If the line contains no space.

    """
    prefix, sep, remainder = text.partition(" ")
    if not sep:
        msg = f'Invalid line "{text}"'
        if line_number:
            msg += f" at line {line_number}"
        raise ParseError(msg)
    if prefix == COMMAND_MARKER:
        kind = LineKind.COMMAND
    elif prefix == DIRECTORY_MARKER:
        kind = LineKind.DIRECTORY
    else:
        kind = LineKind.FILE
    return TranscriptLine(kind=kind, prefix=prefix, remainder=remainder)


def parse_size(token: str, *, line_number: int = 0) -> int:
    """Parse a file-size token as a non-negative integer.

    Only ASCII digits are accepted: no sign, no separators.

    Raises:
        ParseError: If the token is not a non-negative integer.

    """
    if not token.isascii() or not token.isdigit():
        msg = f'Invalid file size "{token}"'
        if line_number:
            msg += f" at line {line_number}"
        raise ParseError(msg)
    return int(token)


class TreeBuilder:
    """Replay a transcript into a ``DirectoryTree``.

    A builder is reusable: every ``build()`` call starts a fresh tree
    with the cursor at the root.  Until the first build it holds no
    tree, and ``cursor`` raises ``RuntimeError``.
    """

    def __init__(self, *, logger: Logger | None = None) -> None:
        """Create a builder.

        Args:
            logger: Optional log buffer that receives build events.

        """
        self._logger = logger
        self._tree: DirectoryTree | None = None
        self._cursor: int | None = None

        self._commands: dict[str, _Handler] = {
            "cd": self._cmd_cd,
            "ls": self._cmd_ls,
        }

    @property
    def cursor(self) -> int:
        """Return the handle of the directory the builder is currently in.

        Raises:
            RuntimeError: If ``build()`` has not been called yet.

        """
        if self._cursor is None:
            msg = "No transcript has been built yet"
            raise RuntimeError(msg)
        return self._cursor

    def build(self, lines: Iterable[str]) -> DirectoryTree:
        """Replay *lines* and return the sealed tree.

        The first line is discarded: it is conventionally ``$ cd /``,
        which the implicit root already covers.  Blank lines are
        skipped.

        Args:
            lines: Transcript lines in order.  Trailing whitespace, newlines
                included, is stripped before a line is read.

        Returns:
            The fully built, sealed tree.

        Raises:
            ParseError: If a line is malformed or a size is not a number.
            NavigationError: If a ``cd`` cannot be resolved.

        """
        tree = DirectoryTree()
        self._tree = tree
        self._cursor = tree.root_id

        for line_number, raw in enumerate(lines, start=1):
            if line_number == 1:
                continue
            text = raw.rstrip()
            if not text:
                continue
            self._feed(text, line_number)

        tree.seal()
        self._log(
            LogLevel.INFO,
            f"Built tree with {len(tree)} nodes",
        )
        return tree

    def _feed(self, text: str, line_number: int) -> None:
        """Interpret one non-blank line against the current cursor."""
        try:
            line = classify_line(text, line_number=line_number)
        except ParseError as e:
            self._log(LogLevel.ERROR, str(e), line_number)
            raise

        tree = self._active_tree()
        match line.kind:
            case LineKind.COMMAND:
                self._run_command(line.remainder, line_number)
            case LineKind.DIRECTORY:
                tree.add_directory(self.cursor, line.remainder)
                self._log(
                    LogLevel.DEBUG,
                    f"dir {line.remainder} in {tree.path_of(self.cursor)}",
                    line_number,
                )
            case LineKind.FILE:
                try:
                    size = parse_size(line.prefix, line_number=line_number)
                except ParseError as e:
                    self._log(LogLevel.ERROR, str(e), line_number)
                    raise
                tree.add_file(self.cursor, line.remainder, size)
                self._log(
                    LogLevel.DEBUG,
                    f"file {line.remainder} ({size}) in {tree.path_of(self.cursor)}",
                    line_number,
                )

    def _run_command(self, remainder: str, line_number: int) -> None:
        name, sep, argument = remainder.partition(" ")
        handler = self._commands.get(name)
        if handler is None:
            self._log(LogLevel.WARNING, f"Ignoring unknown command: {name}", line_number)
            return
        handler(argument if sep else None, line_number)

    # -- Command handlers -------------------------------------------------

    def _cmd_cd(self, target: str | None, line_number: int) -> None:
        """Move the cursor to *target*."""
        if not target:
            self._fail_navigation("cd requires a target", line_number)

        tree = self._active_tree()
        match target:
            case ".":
                pass
            case "..":
                parent = tree.parent_of(self.cursor)
                if parent is None:
                    self._fail_navigation("cannot cd .. from the root", line_number)
                self._cursor = parent
            case "/":
                self._cursor = tree.root_id
            case _:
                child = tree.find_subdirectory(self.cursor, target)
                if child is None:
                    where = tree.path_of(self.cursor)
                    msg = f"invalid cd: no directory {target} in {where}"
                    self._fail_navigation(msg, line_number)
                self._cursor = child

        self._log(LogLevel.DEBUG, f"cd {target} -> {tree.path_of(self.cursor)}", line_number)

    def _cmd_ls(self, _argument: str | None, line_number: int) -> None:
        """Announce a listing; the entries that follow belong to the cursor."""
        where = self._active_tree().path_of(self.cursor)
        self._log(LogLevel.DEBUG, f"ls {where}", line_number)

    # -- Helpers ----------------------------------------------------------

    def _active_tree(self) -> DirectoryTree:
        if self._tree is None:
            msg = "No transcript has been built yet"
            raise RuntimeError(msg)
        return self._tree

    def _fail_navigation(self, message: str, line_number: int) -> NoReturn:
        msg = f"{message} at line {line_number}"
        self._log(LogLevel.ERROR, message, line_number)
        raise NavigationError(msg)

    def _log(self, level: LogLevel, message: str, line_number: int = 0) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=_SOURCE, line_number=line_number)


def build_tree(lines: Iterable[str], *, logger: Logger | None = None) -> DirectoryTree:
    """Replay *lines* with a fresh ``TreeBuilder`` and return the tree."""
    return TreeBuilder(logger=logger).build(lines)
