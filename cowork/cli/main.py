"""CLI entry point for cowork."""

import sys

import click
import structlog

from cowork.cli.auth import auth_group
from cowork.cli.env import env_group
from cowork.config.settings import CoworkSettings
from cowork.exceptions import ConfigurationError
from cowork.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--config",
    type=click.Path(dir_okay=False),
    envvar="COWORK_CONFIG",
    help="Path to a YAML settings file",
)
@click.option("--log-level", help="Logging level (overrides settings)")
@click.version_option(package_name="cowork-auth")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """cowork: scoped, encrypted credentials for git hosting providers."""
    try:
        settings = CoworkSettings.from_yaml(config) if config else CoworkSettings()
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    configure_logging((log_level or settings.log_level).upper())
    log.debug("settings_loaded", config=config, project_config_path=str(settings.project_config_path))

    ctx.obj = {"settings": settings}


cli.add_command(auth_group)
cli.add_command(env_group)


if __name__ == "__main__":
    cli()
