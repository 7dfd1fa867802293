"""Shared-secret validation of inbound webhook notifications.

GitHub signs each delivery with an HMAC of the raw body:
  X-Hub-Signature-256: sha256=<hex>   (preferred)
  X-Hub-Signature:     sha1=<hex>     (legacy)

An empty secret mapping disables validation entirely.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping

from robotally_core.errors import InvalidSignature

logger = logging.getLogger(__name__)

_HEADERS = (
    ("x-hub-signature-256", "sha256"),
    ("x-hub-signature", "sha1"),
)


def sign(secret: str, body: bytes, algorithm: str = "sha256") -> str:
    """Return the header value GitHub would send for ``body`` signed with ``secret``."""
    digest = hmac.new(secret.encode("utf-8"), body, getattr(hashlib, algorithm)).hexdigest()
    return f"{algorithm}={digest}"


def verify_signature(body: bytes, headers: Mapping[str, str], secrets: Mapping[str, str]) -> str | None:
    """Return the name of the secret that signed ``body``, or None when validation is disabled.

    Raises InvalidSignature when secrets are configured and none matches.
    """
    if not secrets:
        return None

    lowered = {k.lower(): v for k, v in headers.items()}
    for header, algorithm in _HEADERS:
        signature = lowered.get(header)
        if not signature:
            continue
        for name, secret in secrets.items():
            if hmac.compare_digest(sign(secret, body, algorithm), signature):
                return name
        logger.warning("Notification %s did not match any configured secret", header)
        raise InvalidSignature("Invalid signature")

    raise InvalidSignature("Missing signature")
