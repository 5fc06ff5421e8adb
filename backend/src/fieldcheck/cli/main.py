"""fieldcheck CLI entry point."""

import click


@click.group()
@click.option(
    "--log-level",
    default=None,
    envvar="FIELDCHECK_LOG_LEVEL",
    help="Logging level (DEBUG, INFO, WARNING, ...).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """fieldcheck: rule-based field validation CLI."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


# Register subcommands
from fieldcheck.cli.check_cmd import check  # noqa: E402
from fieldcheck.cli.rules_cmd import rules  # noqa: E402

cli.add_command(check)
cli.add_command(rules)
