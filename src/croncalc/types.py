"""Type definitions for croncalc."""

from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    """Search direction of the temporal calculator."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def sign(self) -> int:
        """+1 for forward, -1 for backward."""
        return 1 if self is Direction.FORWARD else -1

    @classmethod
    def from_value(cls, value: "Direction | str") -> "Direction":
        """Convert a direction or a direction name to Direction.

        Args:
            value: Direction member or name (case-insensitive). "asc" and
                "desc" are accepted as aliases.

        Returns:
            Direction enum value.

        Raises:
            ValueError: If the value names no direction.
        """
        if isinstance(value, cls):
            return value
        mapping = {
            "forward": cls.FORWARD,
            "asc": cls.FORWARD,
            "backward": cls.BACKWARD,
            "desc": cls.BACKWARD,
        }
        if isinstance(value, str) and value.lower() in mapping:
            return mapping[value.lower()]
        raise ValueError(f"Invalid direction: {value!r}")
