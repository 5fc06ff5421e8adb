"""Rules CLI command: list the built-in tests and filters."""

import json

import click

from fieldcheck.validation.registry import create_default_registry


@click.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print rules as JSON.")
def rules(as_json: bool):
    """List built-in validity tests and filters."""
    docs = create_default_registry().export_documentation()

    if as_json:
        click.echo(json.dumps(docs, indent=2))
        return

    click.echo(f"Validity tests ({len(docs['tests'])}):")
    for rule in docs["tests"]:
        marker = " (complex)" if rule["complex"] else ""
        click.echo(f"  {rule['name']:<14} {rule['message']}{marker}")

    click.echo(f"\nFilters ({len(docs['filters'])}):")
    for rule in docs["filters"]:
        click.echo(f"  {rule['name']}")
