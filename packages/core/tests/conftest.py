from datetime import datetime, timezone
from itertools import count

import pytest

from robotally_core.config import Settings
from robotally_core.errors import UpstreamError
from robotally_core.models import Comment
from robotally_core.store import CommentStore

REFERENCE_TIME = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


class FakeCommentStore(CommentStore):
    """In-memory comment store keyed by thread, recording every write."""

    def __init__(self, comments=None, fail_on=None):
        self.threads = {}
        self.created = []
        self.edited = []
        self._ids = count(1000)
        self._fail_on = fail_on or set()
        self._seed = list(comments or [])

    def _comments(self, thread):
        if thread not in self.threads:
            self.threads[thread] = list(self._seed)
        return self.threads[thread]

    def _check(self, operation):
        if operation in self._fail_on:
            raise UpstreamError(operation, RuntimeError("boom"))

    def list_comments(self, thread):
        self._check("list comments")
        return list(self._comments(thread))

    def create_comment(self, thread, body):
        self._check("comment on issue")
        comment = Comment(id=next(self._ids), author="robotally", body=body)
        self._comments(thread).append(comment)
        self.created.append((thread, body))
        return comment

    def edit_comment(self, thread, comment_id, body):
        self._check("update issue report")
        for comment in self._comments(thread):
            if comment.id == comment_id:
                comment.body = body
                self.edited.append((thread, comment_id, body))
                return comment
        raise UpstreamError("update issue report", RuntimeError("404 Not Found"))


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def make_store():
    return FakeCommentStore


@pytest.fixture
def now():
    return REFERENCE_TIME
