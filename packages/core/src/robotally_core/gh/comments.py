from __future__ import annotations

import logging

from github import Github, GithubException
from requests.exceptions import RequestException

from robotally_core.errors import UpstreamError
from robotally_core.models import Comment, ThreadRef
from robotally_core.store import CommentStore

logger = logging.getLogger(__name__)


def _to_comment(raw) -> Comment:
    return Comment(id=raw.id, author=raw.user.login, body=raw.body or "", created_at=raw.created_at)


class GithubCommentStore(CommentStore):
    """Issue comments through PyGithub; pull requests share the issue comments API.

    API errors and transport failures (connection resets, timeouts) both
    surface as UpstreamError.
    """

    def __init__(self, token: str | None = None, client: Github | None = None):
        self._gh = client if client is not None else Github(token)

    def _get_repo(self, thread: ThreadRef):
        return self._gh.get_repo(thread.full_name)

    def list_comments(self, thread: ThreadRef) -> list[Comment]:
        try:
            issue = self._get_repo(thread).get_issue(thread.number)
            # The issue comments endpoint returns comments oldest first.
            comments = [_to_comment(c) for c in issue.get_comments()]
        except (GithubException, RequestException) as e:
            raise UpstreamError("list comments", e)
        logger.debug("Fetched %d comment(s) from %s", len(comments), thread)
        return comments

    def create_comment(self, thread: ThreadRef, body: str) -> Comment:
        try:
            issue = self._get_repo(thread).get_issue(thread.number)
            return _to_comment(issue.create_comment(body))
        except (GithubException, RequestException) as e:
            raise UpstreamError("comment on issue", e)

    def edit_comment(self, thread: ThreadRef, comment_id: int, body: str) -> Comment:
        try:
            comment = self._get_repo(thread).get_issue_comment(comment_id)
            comment.edit(body)
        except (GithubException, RequestException) as e:
            raise UpstreamError("update issue report", e)
        return Comment(id=comment_id, author=comment.user.login, body=body, created_at=comment.created_at)
