"""Junk file pattern dataclass."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(slots=True)
class JunkPattern:
    """A user-configurable rule identifying junk files.

    ``pattern`` is either an exact file name (``"mainbdf.mot"``) or an
    extension wildcard (``"*.bak"``).  Matching is case-insensitive.
    """

    pattern: str
    description: str = ""
    enabled: bool = True

    @property
    def is_wildcard(self) -> bool:
        return len(self.pattern) > 2 and self.pattern.startswith("*.")

    def matches(self, filename: str) -> bool:
        """Check *filename* (a bare name, not a path) against this pattern."""
        name = filename.casefold()
        if self.is_wildcard:
            return name.endswith(self.pattern[1:].casefold())
        return name == self.pattern.casefold()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JunkPattern:
        return cls(
            pattern=str(data["pattern"]),
            description=str(data.get("description", "")),
            enabled=bool(data.get("enabled", True)),
        )
