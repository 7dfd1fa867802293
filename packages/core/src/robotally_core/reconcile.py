"""Report reconciliation: keeps exactly one report comment per thread.

    Initialize → render an empty report → create_comment
    Refresh    → list_comments → aggregate → recover warning → render
               → edit the first comment authored by the engine

A Refresh on a thread without a report comment does nothing: reports are
only ever created when the thread is opened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from robotally_core.config import Settings
from robotally_core.events import Ignore, Initialize, Intent, Refresh
from robotally_core.models import Comment, ThreadRef
from robotally_core.report import render_report
from robotally_core.store import CommentStore
from robotally_core.tally import aggregate, extract_warning

logger = logging.getLogger(__name__)

IGNORED = "ignored"
CREATED = "created"
EDITED = "edited"
SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    action: str  # "ignored" | "created" | "edited" | "skipped"
    thread: ThreadRef | None = None
    comment_id: int | None = None
    body: str | None = None


def find_report(comments: list[Comment], identity: str) -> Comment | None:
    """Return the first comment authored by the engine, in creation order."""
    for comment in comments:
        if comment.author == identity:
            return comment
    return None


def build_report(comments: list[Comment], settings: Settings, now: datetime | None = None) -> str:
    """Recompute the report of a thread from its full comment history."""
    tally = aggregate(comments, settings.identity, settings.disabled_reactions)
    existing = find_report(comments, settings.identity)
    warning = extract_warning(existing.body) if existing else ""
    return render_report(warning, tally.votes, tally.reactions, now=now)


def initialize(intent: Initialize, settings: Settings, store: CommentStore, now: datetime | None = None) -> Outcome:
    body = render_report(intent.warning, None, None, now=now)
    comment = store.create_comment(intent.thread, body)
    logger.info("Created report comment %s on %s", comment.id, intent.thread)
    return Outcome(action=CREATED, thread=intent.thread, comment_id=comment.id, body=body)


def refresh(intent: Refresh, settings: Settings, store: CommentStore, now: datetime | None = None) -> Outcome:
    comments = store.list_comments(intent.thread)
    report = find_report(comments, settings.identity)
    if report is None:
        logger.info("No report comment on %s; nothing to refresh", intent.thread)
        return Outcome(action=SKIPPED, thread=intent.thread)

    body = build_report(comments, settings, now=now)
    store.edit_comment(intent.thread, report.id, body)
    logger.info("Updated report comment %s on %s (%d comments scanned)", report.id, intent.thread, len(comments))
    return Outcome(action=EDITED, thread=intent.thread, comment_id=report.id, body=body)


def handle(intent: Intent, settings: Settings, store: CommentStore, now: datetime | None = None) -> Outcome:
    """Carry out a classified intent against the comment store.

    Store failures propagate as UpstreamError; a failed edit leaves the old
    report in place until the next successful refresh.
    """
    if isinstance(intent, Ignore):
        return Outcome(action=IGNORED)
    if isinstance(intent, Initialize):
        return initialize(intent, settings, store, now=now)
    if isinstance(intent, Refresh):
        return refresh(intent, settings, store, now=now)
    raise TypeError(f"Unknown intent: {intent!r}")
