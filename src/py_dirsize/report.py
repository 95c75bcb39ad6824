"""Disk report — the numbers a transcript analysis ends with.

``build_report`` runs the size queries against a built tree and the
report settings; ``format_report`` turns the result into text.  Both
are pure, so callers decide how (and whether) to display anything.
"""

from __future__ import annotations

from dataclasses import dataclass

from py_dirsize.config import ReportSettings
from py_dirsize.fs.tree import DirectoryTree
from py_dirsize.logging import Logger, LogLevel
from py_dirsize.sizes import SizeAggregator, SizeEntry

_SOURCE = "report"


@dataclass(frozen=True)
class DiskReport:
    """Summary of a reconstructed disk.

    ``directory_to_delete`` is None when the disk already has enough
    free space.
    """

    total_used: int
    capacity: int
    unused: int
    size_cap: int
    sum_at_most_cap: int
    space_to_free: int
    directory_to_delete: SizeEntry | None


def build_report(
    tree: DirectoryTree,
    settings: ReportSettings | None = None,
    *,
    logger: Logger | None = None,
) -> DiskReport:
    """Compute every report value for *tree*.

    Args:
        tree: A fully built tree.
        settings: Disk constants; defaults when None.
        logger: Optional log buffer for summary events.

    Raises:
        NoCandidateError: If space must be freed but no directory is
            large enough.

    """
    settings = settings or ReportSettings()
    sizes = SizeAggregator(tree, logger=logger)
    used = sizes.total_size()
    needed = sizes.space_to_free(settings.capacity, settings.required_free)
    victim = sizes.smallest_at_least(needed) if needed > 0 else None

    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"Used {used} of {settings.capacity}; need to free {max(needed, 0)}",
            source=_SOURCE,
        )

    return DiskReport(
        total_used=used,
        capacity=settings.capacity,
        unused=settings.capacity - used,
        size_cap=settings.size_cap,
        sum_at_most_cap=sizes.sum_at_most(settings.size_cap),
        space_to_free=max(needed, 0),
        directory_to_delete=victim,
    )


def format_report(report: DiskReport) -> str:
    """Format a report as a short block of text."""
    lines = [
        f"Total used:          {report.total_used}",
        f"Unused:              {report.unused} of {report.capacity}",
        f"Sum of dirs <= {report.size_cap}: {report.sum_at_most_cap}",
    ]
    if report.directory_to_delete is None:
        lines.append("Space to free:       0 (nothing to delete)")
    else:
        lines.append(f"Space to free:       {report.space_to_free}")
        victim = report.directory_to_delete
        lines.append(f"Delete:              {victim.path or victim.name} ({victim.size})")
    return "\n".join(lines)
