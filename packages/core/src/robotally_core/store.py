"""Abstract comment store interface.

The engine never talks to GitHub directly: it reads and writes thread
comments through this interface, so the reconciliation logic can run
against PyGithub in production and an in-memory fake in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from robotally_core.models import Comment, ThreadRef


class CommentStore(ABC):
    """Remote thread storage, the system of record for every report.

    Implementations raise UpstreamError on any transport or authorization
    failure; the engine never retries.
    """

    @abstractmethod
    def list_comments(self, thread: ThreadRef) -> list[Comment]:
        """Return every comment of the thread, oldest first."""

    @abstractmethod
    def create_comment(self, thread: ThreadRef, body: str) -> Comment:
        """Post a new comment on the thread."""

    @abstractmethod
    def edit_comment(self, thread: ThreadRef, comment_id: int, body: str) -> Comment:
        """Replace the body of an existing comment in the thread's repository."""
