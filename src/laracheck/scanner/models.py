"""Scanner data models — project files and soft scan warnings."""

from __future__ import annotations

from dataclasses import dataclass, field

from laracheck.rules.models import FileRole


@dataclass(frozen=True)
class ProjectFile:
    """A single file read during one scan pass."""

    path: str
    relative_path: str
    role: FileRole
    content: str = field(default="", repr=False)

    def lines(self) -> list[str]:
        return self.content.splitlines()


@dataclass(frozen=True)
class ScanWarning:
    """A recoverable problem met while walking the project tree."""

    path: str
    reason: str
