"""GitHub webhook event decoding and classification.

A notification is reduced to one of three intents before anything touches
the comment store:

    Ignore      sent by the engine itself (avoids feedback loops)
    Initialize  an issue or pull request was just opened
    Refresh     a comment was posted on an existing thread

Only the fields the engine needs are decoded; everything else in the
payload is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from robotally_core.config import Settings
from robotally_core.errors import MalformedEvent, UnsupportedAction
from robotally_core.models import ThreadRef

logger = logging.getLogger(__name__)

OPENED = "opened"
CREATED = "created"


@dataclass(frozen=True)
class IssueThread:
    number: int

    def warning(self, protected_branch: str) -> str:
        return ""


@dataclass(frozen=True)
class PullRequestThread:
    number: int
    base_branch: str = ""

    def warning(self, protected_branch: str) -> str:
        if self.base_branch and self.base_branch == protected_branch:
            return f"Pull request against `{self.base_branch}`"
        return ""


Thread = Union[IssueThread, PullRequestThread]


@dataclass(frozen=True)
class Event:
    action: str
    owner: str
    repo: str
    sender: str
    thread: Thread | None = None

    @property
    def ref(self) -> ThreadRef:
        if self.thread is None:
            raise MalformedEvent("Invalid GitHub event: neither an issue nor a pull request")
        return ThreadRef(owner=self.owner, repo=self.repo, number=self.thread.number)


@dataclass(frozen=True)
class Ignore:
    reason: str


@dataclass(frozen=True)
class Initialize:
    thread: ThreadRef
    warning: str = ""


@dataclass(frozen=True)
class Refresh:
    thread: ThreadRef


Intent = Union[Ignore, Initialize, Refresh]


def _login(obj: Any, what: str) -> str:
    if not isinstance(obj, dict) or not isinstance(obj.get("login"), str):
        raise MalformedEvent(f"Invalid GitHub event: missing {what} login")
    return obj["login"]


def _number(obj: Any) -> int | None:
    if not isinstance(obj, dict):
        return None
    number = obj.get("number")
    # bool is an int subclass; a JSON true is never a thread number
    if isinstance(number, bool) or not isinstance(number, int):
        return None
    return number


def _thread(payload: dict) -> Thread | None:
    """Resolve the thread variant, preferring the issue when both are present.

    Issue comment events on pull requests carry an ``issue`` object, so the
    issue number is the one the comments API understands in every case.
    Events about neither (pings, check runs) have no thread.
    """
    issue_number = _number(payload.get("issue"))
    if issue_number is not None:
        return IssueThread(issue_number)

    pull = payload.get("pull_request")
    pull_number = _number(pull)
    if pull_number is not None:
        base = pull.get("base") or {}
        branch = base.get("ref") if isinstance(base, dict) else None
        return PullRequestThread(pull_number, branch if isinstance(branch, str) else "")

    return None


def parse_event(payload: Any) -> Event:
    """Decode a webhook JSON object into an Event, raising MalformedEvent on bad shape.

    The action and the thread are optional here; whether they are required
    depends on the sender, which only classify() knows how to judge.
    """
    if not isinstance(payload, dict):
        raise MalformedEvent("Invalid GitHub event: payload is not an object")

    action = payload.get("action")

    repository = payload.get("repository")
    if not isinstance(repository, dict) or not isinstance(repository.get("name"), str):
        raise MalformedEvent("Invalid GitHub event: missing repository")

    return Event(
        action=action if isinstance(action, str) else "",
        owner=_login(repository.get("owner"), "repository owner"),
        repo=repository["name"],
        sender=_login(payload.get("sender"), "sender"),
        thread=_thread(payload),
    )


def classify(payload: Any, settings: Settings) -> Intent:
    """Map a decoded webhook payload to the intent the engine should act on.

    Checked in order: sender, action, thread. Self-originated events are
    ignored whatever they carry, so the engine's own edits never bounce back
    as errors; unsupported actions are rejected before the thread is needed.
    """
    event = parse_event(payload)

    if event.sender == settings.identity:
        logger.debug("Ignoring self-originated %r event on %s/%s", event.action, event.owner, event.repo)
        return Ignore(reason="self-originated")

    if event.action not in (OPENED, CREATED):
        raise UnsupportedAction(f"Non-supported action: {event.action!r}")

    if event.thread is None:
        raise MalformedEvent("Invalid GitHub event: neither an issue nor a pull request")

    if event.action == OPENED:
        return Initialize(thread=event.ref, warning=event.thread.warning(settings.protected_branch))
    return Refresh(thread=event.ref)
