"""Build and analysis log.

The logger records structured entries for what happened while a
transcript was replayed: which directories and files were created,
where the cursor moved, which commands were ignored, and why a run
failed.

It mirrors a kernel log buffer (``dmesg``): an append-only list of
records that callers can filter after the fact, instead of writing to
a stream as events happen.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single record (level, message, source, line number).
- **Logger** — an append-only log with filtering.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "builder").
        line_number: The 1-based transcript line involved (0 = none).

    """

    level: LogLevel
    message: str
    source: str
    line_number: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with an optional line tag."""
        where = f" (line {self.line_number})" if self.line_number else ""
        return f"[{self.level.name}] {self.source}: {self.message}{where}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        line_number: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            line_number: Transcript line associated with the event.

        """
        self._entries.append(
            LogEntry(level=level, message=message, source=source, line_number=line_number)
        )

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)
