"""CLI entry point for robotally.

Commands:
  serve    run the webhook server that keeps thread reports up to date
  refresh  recompute and rewrite the report of one thread by hand
"""

from __future__ import annotations

import importlib.metadata

import click

from robotally_cli.commands.refresh import refresh_cmd
from robotally_cli.commands.serve import serve_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("robotally"),
    prog_name="robotally",
)
@click.option(
    "--config",
    "config_path",
    default=".robotally.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="ROBOTALLY_CONFIG",
)
@click.option("--identity", default=None, help="GitHub login the reports are posted under. Overrides config file.")
@click.pass_context
def main(ctx: click.Context, config_path: str, identity: str | None):
    """Aggregate review votes and reactions into one report comment per thread."""
    from robotally_core.config import load_config

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"identity": identity})

    ctx.obj["config"] = config


main.add_command(serve_cmd)
main.add_command(refresh_cmd)
