"""CLI for machine image computation."""

import json
import os
from pathlib import Path
from typing import TextIO

import click
import yaml
from pydantic import ValidationError
from safir.asyncio import run_with_asyncio
from safir.click import display_help
from safir.sentry import initialize_sentry, report_exception
from safir.slack.webhook import SlackWebhookClient
from structlog.stdlib import get_logger

from . import __version__
from .config import Config, OutputFormat
from .constants import (
    ALERT_HOOK_ENV_VAR,
    CONFIG_FILE,
    CONFIG_FILE_ENV_VAR,
    ROOT_LOGGER,
)
from .exceptions import CatalogLoadError, ConflictingFiltersError
from .models.domain.machineimage import MachineImage
from .models.v1.catalog import MachineImagesRequest
from .pipeline import compute_machine_images

__all__ = ["main", "main_with_sentry"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s")
def main() -> None:
    """Machine image computation command-line interface."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.argument("subtopic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None, subtopic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic, subtopic)


def _make_config(
    *,
    config_file: Path | None,
    debug: bool,
    output_format: OutputFormat | None,
) -> Config:
    """Construct the configuration, overriding it from CLI options."""
    # Prefer config file from env var
    if env_config_path := os.getenv(CONFIG_FILE_ENV_VAR):
        config_file = Path(env_config_path)

    # The default configuration file is optional; an explicit one is not.
    if config_file is None and not CONFIG_FILE.exists():
        config = Config()
        config.configure_logging()
    else:
        config = Config.from_file(config_file or CONFIG_FILE)

    if debug:
        config.debug = debug
        config.configure_logging()
    if output_format:
        config.output_format = output_format
    return config


def _load_request(path: Path) -> MachineImagesRequest:
    """Read the input document, which may be YAML or JSON."""
    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise CatalogLoadError(path, str(exc)) from exc
    try:
        return MachineImagesRequest.model_validate(data or {})
    except ValidationError as exc:
        raise CatalogLoadError(path, str(exc)) from exc


async def _report_error(exc: Exception) -> None:
    """Report an exception to Sentry and, if configured, to Slack."""
    logger = get_logger(ROOT_LOGGER)
    if alert_hook := os.environ.get(ALERT_HOOK_ENV_VAR, None):
        slack_client = SlackWebhookClient(
            alert_hook,
            "Machine Images",
            logger=logger,
        )
    else:
        slack_client = None
    await report_exception(exc, slack_client)


def _dump_images(
    images: list[MachineImage], output_format: OutputFormat
) -> str:
    data = [x.model_dump(mode="json") for x in images]
    if output_format == OutputFormat.JSON:
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False)


@main.command()
@click.argument(
    "input_file", type=click.Path(dir_okay=False, path_type=Path)
)
@click.argument("output_file", type=click.File("w"), default="-")
@click.option(
    "--config-file",
    "-c",
    help="Application configuration file",
    type=Path,
    default=None,
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([x.value for x in OutputFormat]),
    help="Output format (overrides configuration)",
    default=None,
)
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug logging",
)
@run_with_asyncio
async def compute(
    *,
    input_file: Path,
    output_file: TextIO,
    config_file: Path | None,
    output_format: str | None,
    debug: bool,
) -> None:
    """Compute the machine images described by INPUT_FILE.

    The result is written to OUTPUT_FILE, or to standard output if that is
    not given.
    """
    config = _make_config(
        config_file=config_file,
        debug=debug,
        output_format=OutputFormat(output_format) if output_format else None,
    )
    logger = get_logger(ROOT_LOGGER)
    try:
        request = _load_request(input_file)
        images = compute_machine_images(
            lss_images=request.lss_images,
            landscape_images=request.landscape_images,
            provider_images=request.provider_images,
            provider_landscape_images=request.provider_landscape_images,
            disabled_names=request.disabled_machine_images,
            include_filters=request.include_filters,
            exclude_filters=request.exclude_filters,
            logger=logger,
        )
    except (CatalogLoadError, ConflictingFiltersError) as exc:
        await _report_error(exc)
        raise click.ClickException(str(exc)) from exc
    output_file.write(_dump_images(images, config.output_format))


def main_with_sentry() -> None:
    """Call the main command group after initializing Sentry."""
    initialize_sentry(release=__version__)
    main()
