"""Check CLI command: validate a data document against a rule set."""

import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml

from fieldcheck.config import ConfigError, ValidatorConfig
from fieldcheck.validation.ruleset import RuleSet, RuleSetError
from fieldcheck.validation.validator import Validator


def _load_data(path: Path) -> Any:
    """Load the YAML/JSON document to validate."""
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed data document: {e}", path) from e


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _report(validator: Validator, as_json: bool) -> None:
    if as_json:
        payload = {
            "valid": validator.valid,
            "values": validator.values.to_dict(),
            "errors": {field: ctx.message for field, ctx in validator.errors.items()},
        }
        click.echo(json.dumps(payload, indent=2, default=str))
        return

    for field, context in validator.result.items():
        if context.valid:
            click.echo(click.style(f"  ✓ {field}", fg="green"))
        else:
            click.echo(click.style(f"  ✗ {field}: {context.message}", fg="red"))

    errors = validator.errors.count()
    if errors:
        click.echo(click.style(f"\n{errors} invalid field(s)", fg="red", bold=True))
    else:
        click.echo(click.style("\nAll fields are valid.", fg="green", bold=True))


@click.command()
@click.argument("rules_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config with message overrides (default: from environment).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON.")
@click.pass_context
def check(ctx: click.Context, rules_path: Path, data_path: Path, config_path: Path | None, as_json: bool):
    """Validate the fields of DATA_PATH against the rule set in RULES_PATH.

    Exits with status 1 when any field is invalid.
    """
    try:
        config = ValidatorConfig.from_yaml(config_path) if config_path else ValidatorConfig.from_env()
        log_level = (ctx.obj or {}).get("log_level") or config.log_level
        _configure_logging(log_level)

        ruleset = RuleSet.from_yaml(rules_path)
        data = _load_data(data_path)
    except (RuleSetError, ConfigError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    validator = config.create_validator(data if data is not None else {})
    ruleset.apply(validator)
    _report(validator, as_json)

    if validator.invalid:
        raise SystemExit(1)
