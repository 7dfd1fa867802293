"""refresh command: recompute the report of one thread."""

from __future__ import annotations

import click
from rich.console import Console

from robotally_cli.commands.serve import _require_token
from robotally_core.config import Settings
from robotally_core.errors import UpstreamError
from robotally_core.events import Refresh
from robotally_core.gh.comments import GithubCommentStore
from robotally_core.models import ThreadRef
from robotally_core.reconcile import SKIPPED, build_report, handle

console = Console()


def _parse_repo(repo: str) -> tuple[str, str]:
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        raise click.BadParameter("Expected owner/name.", param_hint="--repo")
    return owner, name


@click.command("refresh")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--number", "number", type=int, required=True, help="Issue or pull request number.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the recomputed report without editing the comment.",
)
@click.pass_context
def refresh_cmd(ctx, repo: str, number: int, shadow: bool):
    """Rewrite the report comment of a thread from its full comment history.

    Useful after the server missed deliveries. Threads without a report
    comment are left untouched.
    """
    config = ctx.obj["config"]
    settings = Settings.from_config(config)
    owner, name = _parse_repo(repo)
    thread = ThreadRef(owner=owner, repo=name, number=number)
    store = GithubCommentStore(token=_require_token(config))

    try:
        if shadow:
            body = build_report(store.list_comments(thread), settings)
            console.print(f"[bold]Report for {thread} (not posted)[/bold]\n")
            console.print(body, markup=False, highlight=False, emoji=False)
            return
        outcome = handle(Refresh(thread=thread), settings, store)
    except UpstreamError as e:
        raise click.ClickException(e.detail)

    if outcome.action == SKIPPED:
        console.print(f"[yellow]No report comment by {settings.identity} on {thread}. Nothing to do.[/yellow]")
    else:
        console.print(f"[green]Report comment {outcome.comment_id} updated on {thread}.[/green]")
