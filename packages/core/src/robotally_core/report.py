"""Status report rendering.

The report is a pure function of (warning, votes, reactions, time): the
same inputs always produce the same bytes, so editing the report comment
in place is idempotent apart from the timestamp footer.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Mapping

from robotally_core.tally import DOWNVOTE, UPVOTE

_VOTE_HEADER = "| Vote | Count | Reviewers |\n| :---: | :---: | :---: |"
_REACTION_HEADER = "| Reaction | Users |\n| :---: | :---: |"

# English names regardless of LC_TIME
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _mentions(users) -> str:
    return " ".join(f"@{user}" for user in sorted(users))


def format_timestamp(now: datetime) -> str:
    """Format as e.g. ``Mon Jan 2 15:04:05 UTC 2006``; naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    weekday = _WEEKDAYS[now.weekday()]
    month = _MONTHS[now.month - 1]
    return f"{weekday} {month} {now.day} {now:%H:%M:%S} UTC {now.year}"


def order_reactions(reactions: Mapping[str, set[str]]) -> list[str]:
    """Most popular codes first; equal counts fall back to the code itself."""
    return sorted(reactions, key=lambda code: (-len(reactions[code]), code))


def render_report(
    warning: str | None,
    votes: Mapping[str, bool] | None,
    reactions: Mapping[str, set[str]] | None,
    now: datetime | None = None,
) -> str:
    votes = votes or {}
    reactions = reactions or {}
    sections = []

    if warning:
        sections.append(f":exclamation: {warning} :exclamation:")

    up = [user for user, approve in votes.items() if approve]
    down = [user for user, approve in votes.items() if not approve]
    sections.append(
        "\n".join(
            [
                _VOTE_HEADER,
                f"| {UPVOTE} | {len(up)} | {_mentions(up)} |",
                f"| {DOWNVOTE} | {len(down)} | {_mentions(down)} |",
            ]
        )
    )

    populated = {code: users for code, users in reactions.items() if users}
    if populated:
        rows = [f"| {code} | {_mentions(populated[code])} |" for code in order_reactions(populated)]
        sections.append("\n".join([_REACTION_HEADER, *rows]))

    sections.append(f"_Updated: {format_timestamp(now or datetime.now(timezone.utc))}_")
    return "\n\n".join(sections)
