import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from merge_me import app_config as conf
from merge_me.config import (
    Inputs,
    InvalidMaximumRetries,
    InvalidMergeMethod,
    parse_maximum_retries,
    parse_merge_method,
)
from merge_me.event_handlers import handle_event
from merge_me.logging import configure_logging

logger = structlog.get_logger()


@click.group()
def cli() -> None:
    pass


@cli.command(help="generate the JSON schema for the action inputs")
def gen_inputs_json_schema() -> None:
    click.echo(json.dumps(Inputs.model_json_schema(), indent=2))


@cli.command(help="approve and merge the pull request for a workflow event")
@click.option("--event-name", default=conf.GITHUB_EVENT_NAME, show_default=True)
@click.option(
    "--event-path",
    type=click.Path(exists=True, dir_okay=False),
    default=conf.GITHUB_EVENT_PATH,
)
@click.option("--github-login", default=conf.GITHUB_LOGIN, show_default=True)
@click.option("--merge-method", default=conf.MERGE_METHOD, show_default=True)
@click.option("--maximum-retries", default=conf.MAXIMUM_RETRIES, show_default=True)
def run(
    event_name: Optional[str],
    event_path: Optional[str],
    github_login: str,
    merge_method: str,
    maximum_retries: str,
) -> None:
    """
    Reads the event the workflow was triggered by and merges the associated
    pull request if it is eligible. Exits non-zero when merging fails.
    """
    if conf.GITHUB_TOKEN is None:
        raise click.UsageError("GITHUB_TOKEN must be set")
    if event_name is None or event_path is None:
        raise click.UsageError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set")
    try:
        parsed_merge_method = parse_merge_method(merge_method)
    except InvalidMergeMethod as e:
        raise click.BadParameter(str(e), param_hint="--merge-method")
    try:
        parsed_maximum_retries = parse_maximum_retries(maximum_retries)
    except InvalidMaximumRetries as e:
        raise click.BadParameter(str(e), param_hint="--maximum-retries")

    configure_logging(conf.LOGGING_LEVEL)

    payload = json.loads(Path(event_path).read_text())
    inputs = Inputs(
        github_login=github_login,
        merge_method=parsed_merge_method,
        maximum_retries=parsed_maximum_retries,
    )
    try:
        asyncio.run(
            handle_event(event_name, payload, token=conf.GITHUB_TOKEN, inputs=inputs)
        )
    except Exception:
        logger.exception("An unexpected error occurred", event_name=event_name)
        sys.exit(1)
