"""Tests for the FastAPI webhook endpoint."""

import json
import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from robotally_cli.server import create_app
from robotally_core.config import Settings
from robotally_core.errors import UpstreamError
from robotally_core.models import Comment
from robotally_core.signature import sign
from robotally_core.store import CommentStore


def encode(action, sender="alice", **extra):
    payload = {
        "action": action,
        "repository": {"name": "widgets", "owner": {"login": "octo"}},
        "sender": {"login": sender},
        **extra,
    }
    return json.dumps(payload).encode()


@pytest.fixture
def store():
    store = MagicMock(spec=CommentStore)
    store.create_comment.return_value = Comment(id=10, author="robotally", body="")
    store.list_comments.return_value = [Comment(id=10, author="robotally", body="report")]
    return store


@pytest.fixture
def client(store):
    return TestClient(create_app(Settings(), store))


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestNotificationEndpoint:
    def test_opened_creates_report(self, client, store):
        response = client.post("/", content=encode("opened", issue={"number": 3}))
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "action": "created"}
        store.create_comment.assert_called_once()

    def test_created_edits_report(self, client, store):
        response = client.post("/", content=encode("created", issue={"number": 3}))
        assert response.status_code == 200
        assert response.json()["action"] == "edited"
        store.edit_comment.assert_called_once()

    def test_self_originated_accepted_and_ignored(self, client, store):
        response = client.post("/", content=encode("created", sender="robotally", issue={"number": 3}))
        assert response.status_code == 200
        assert response.json()["action"] == "ignored"
        store.list_comments.assert_not_called()

    def test_malformed_body_is_400(self, client, store):
        response = client.post("/", content=b"not json")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid GitHub event"
        store.create_comment.assert_not_called()

    def test_unsupported_action_is_405(self, client):
        response = client.post("/", content=encode("closed", issue={"number": 3}))
        assert response.status_code == 405
        assert "Non-supported action" in response.json()["detail"]

    def test_upstream_failure_is_500(self, client, store):
        store.list_comments.side_effect = UpstreamError("list comments", RuntimeError("timeout"))
        response = client.post("/", content=encode("created", issue={"number": 3}))
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to list comments: timeout"

    def test_upstream_failure_logged_with_cause(self, client, store, caplog):
        cause = RuntimeError("timeout")
        store.list_comments.side_effect = UpstreamError("list comments", cause)
        with caplog.at_level(logging.ERROR, logger="robotally_cli.server"):
            client.post("/", content=encode("created", issue={"number": 3}))
        record = next(r for r in caplog.records if r.name == "robotally_cli.server")
        assert record.levelno == logging.ERROR
        assert record.exc_info[1] is cause

    def test_unsigned_notification_rejected_when_secrets_configured(self, store):
        client = TestClient(create_app(Settings(secrets={"main": "s3cr3t"}), store))
        response = client.post("/", content=encode("opened", issue={"number": 3}))
        assert response.status_code == 403
        store.create_comment.assert_not_called()

    def test_signed_notification_accepted(self, store):
        client = TestClient(create_app(Settings(secrets={"main": "s3cr3t"}), store))
        body = encode("opened", issue={"number": 3})
        response = client.post("/", content=body, headers={"X-Hub-Signature-256": sign("s3cr3t", body)})
        assert response.status_code == 200

    def test_ping_is_405(self, client, store):
        body = json.dumps(
            {
                "zen": "Design for failure.",
                "hook_id": 1,
                "repository": {"name": "widgets", "owner": {"login": "octo"}},
                "sender": {"login": "alice"},
            }
        ).encode()
        response = client.post("/", content=body)
        assert response.status_code == 405
        store.create_comment.assert_not_called()
