"""Report settings — the disk constants behind the size reports.

The transcript says nothing about the disk it came from, so two of the
reports need numbers from outside:

- **capacity** — the total size of the disk.
- **required_free** — how much free space an update needs.
- **size_cap** — the inclusive upper bound for the "small directories"
  sum.

Settings can come from a JSON file::

    {"capacity": 70000000, "required_free": 30000000, "size_cap": 100000}

Missing keys fall back to the defaults.  A file that cannot be read,
is not valid JSON, or holds a negative or non-integer value is a
``ConfigError``.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_CAPACITY = 70_000_000
DEFAULT_REQUIRED_FREE = 30_000_000
DEFAULT_SIZE_CAP = 100_000


class ConfigError(RuntimeError):
    """Raise when report settings cannot be loaded.

    Examples: missing file, corrupt JSON, negative capacity.
    """


@dataclass(frozen=True)
class ReportSettings:
    """Constants the size reports are computed against."""

    capacity: int = DEFAULT_CAPACITY
    required_free: int = DEFAULT_REQUIRED_FREE
    size_cap: int = DEFAULT_SIZE_CAP

    def to_dict(self) -> dict[str, int]:
        """Return the settings as a plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportSettings:
        """Build settings from a dict, defaulting missing keys.

        Raises:
            ConfigError: If a value is not a non-negative integer.

        """
        defaults = cls()
        values: dict[str, int] = {}
        for key, default in asdict(defaults).items():
            value = data.get(key, default)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                msg = f"Setting {key!r} must be a non-negative integer, got {value!r}"
                raise ConfigError(msg)
            values[key] = value
        return cls(**values)


def load_settings(path: Path | None = None) -> ReportSettings:
    """Load settings from a JSON file, or return the defaults.

    Args:
        path: JSON settings file.  If None, defaults are used.

    Raises:
        ConfigError: If the file cannot be read or holds bad values.

    """
    if path is None:
        return ReportSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Cannot load settings: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Settings file must hold a JSON object: {path}"
        raise ConfigError(msg)
    return ReportSettings.from_dict(data)
