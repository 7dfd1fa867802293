"""Value types shared by the engine.

Kept free of PyGithub types so the aggregation and rendering code can be
exercised with plain data, and so the comment store is swappable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ThreadRef:
    """An issue or pull request, identified by owner/repository/number."""

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"


@dataclass
class Comment:
    """A single thread comment as returned by the comment store."""

    id: int
    author: str
    body: str = ""
    created_at: datetime | None = None


@dataclass
class Tally:
    votes: dict[str, bool] = field(default_factory=dict)
    reactions: dict[str, set[str]] = field(default_factory=dict)
