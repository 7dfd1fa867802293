"""Notification pipeline: raw webhook delivery in, reconciliation outcome out.

Transport-agnostic: the HTTP layer hands over the raw body and headers and
maps the RobotallyError it may get back onto a status code.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Mapping

from robotally_core.config import Settings
from robotally_core.errors import MalformedEvent
from robotally_core.events import classify
from robotally_core.reconcile import Outcome, handle
from robotally_core.signature import verify_signature
from robotally_core.store import CommentStore

logger = logging.getLogger(__name__)


def decode_payload(body: bytes) -> dict:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MalformedEvent("Invalid GitHub event")
    if not isinstance(payload, dict):
        raise MalformedEvent("Invalid GitHub event")
    return payload


def process_notification(
    body: bytes,
    headers: Mapping[str, str],
    settings: Settings,
    store: CommentStore,
    now: datetime | None = None,
) -> Outcome:
    """Verify, decode, classify and handle one webhook delivery."""
    verify_signature(body, headers, settings.secrets)
    payload = decode_payload(body)
    intent = classify(payload, settings)
    logger.debug("Classified %r event as %s", payload.get("action"), type(intent).__name__)
    return handle(intent, settings, store, now=now)
