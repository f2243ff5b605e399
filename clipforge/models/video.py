"""Imported source video record (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Video:
    """A source media file imported into the project.

    *path* is either project-relative (files copied into the project's
    media folder) or absolute.
    """

    id: str
    name: str
    path: str
    size: int = 0  # Bytes

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Video:
        return cls(
            id=data["id"],
            name=data["name"],
            path=data["path"],
            size=data.get("size", 0),
        )
