"""Vote and reaction extraction from raw comment text."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from robotally_core.models import Comment, Tally

logger = logging.getLogger(__name__)

UPVOTE = ":+1:"
DOWNVOTE = ":-1:"

_REACTION_RE = re.compile(r":[a-z0-9_]+:")
_WARNING_RE = re.compile(r":exclamation: (.*) :exclamation:")


def extract(body: str | None, disabled: Iterable[str] = ()) -> tuple[bool | None, set[str]]:
    """Return the vote and the set of reaction codes found in one comment.

    The up-vote token is checked first, so a comment carrying both tokens
    counts as an approval. Repeated codes collapse to one occurrence.
    """
    text = body or ""

    vote: bool | None = None
    if UPVOTE in text:
        vote = True
    elif DOWNVOTE in text:
        vote = False

    disabled = set(disabled)
    reactions = {code for code in _REACTION_RE.findall(text) if code not in disabled}
    return vote, reactions


def extract_warning(body: str | None) -> str:
    """Recover the warning banner embedded in a previously rendered report, or ""."""
    match = _WARNING_RE.search(body or "")
    return match.group(1) if match else ""


def aggregate(comments: Iterable[Comment], identity: str, disabled: Iterable[str] = ()) -> Tally:
    """Fold every comment of a thread into vote and reaction tallies.

    Comments must be given in creation order: a user's later vote overwrites
    an earlier one. Comments authored by ``identity`` are skipped entirely.
    """
    disabled = frozenset(disabled)
    tally = Tally()

    for comment in comments:
        if comment.author == identity:
            continue

        vote, reactions = extract(comment.body, disabled)
        if vote is not None:
            tally.votes[comment.author] = vote
        for code in reactions:
            tally.reactions.setdefault(code, set()).add(comment.author)

        logger.debug("Comment %s by %s: vote=%s reactions=%s", comment.id, comment.author, vote, sorted(reactions))

    return tally
