"""serve command: run the webhook server."""

from __future__ import annotations

import logging
import subprocess
import sys

import click

from robotally_core.config import Settings


def _gh_session_token() -> str | None:
    """Token of the local `gh auth login` session, or None.

    Lets an operator run robotally by hand while logged in to gh as the bot
    account, without exporting GITHUB_TOKEN.
    """
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _require_token(config: dict) -> str:
    """GITHUB_TOKEN (already resolved by load_config) first, then the gh session."""
    token = config.get("github_token") or _gh_session_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "The token must belong to the account the reports are posted under."
        )
    return token


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8080, show_default=True, type=int, help="Port to listen on.")
@click.option("--log-level", default="info", show_default=True, type=click.Choice(["debug", "info", "warning"]))
@click.pass_context
def serve_cmd(ctx, host: str, port: int, log_level: str):
    """Listen for GitHub issue and comment webhooks.

    \b
    Point a repository webhook at this server with the "Issues",
    "Pull requests" and "Issue comments" events enabled.
    """
    import uvicorn

    from robotally_cli.server import create_app
    from robotally_core.gh.comments import GithubCommentStore

    config = ctx.obj["config"]
    token = _require_token(config)
    settings = Settings.from_config(config)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.secrets:
        logging.getLogger(__name__).warning("No webhook secrets configured; accepting unsigned notifications.")

    app = create_app(settings, GithubCommentStore(token=token))
    uvicorn.run(app, host=host, port=port, log_level=log_level)
