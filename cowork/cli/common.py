"""Helpers shared by the cowork command groups."""

import sys
from typing import NoReturn

import click

from cowork.config.settings import CoworkSettings
from cowork.enums import AuthScope
from cowork.exceptions import CoworkError

SCOPE_CHOICES = click.Choice([scope.value for scope in AuthScope], case_sensitive=False)


def mask_secret(value: str) -> str:
    """Keep the first and last four characters of a secret visible.

    Example:
        >>> mask_secret("ghp_abcdefghijkl")
        'ghp_********ijkl'
    """
    if len(value) > 8:
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
    return "*" * len(value)


def get_settings(ctx: click.Context) -> CoworkSettings:
    """Settings loaded by the root group, or defaults when a group runs on its own."""
    if ctx.obj and ctx.obj.get("settings") is not None:
        return ctx.obj["settings"]
    settings = CoworkSettings()
    ctx.ensure_object(dict)["settings"] = settings
    return settings


def fail(error: CoworkError) -> NoReturn:
    """Print an error (and its suggestion, if any) and exit with status 1."""
    click.echo(click.style(f"Error: {error.message}", fg="red"), err=True)
    suggestion = getattr(error, "suggestion", None)
    if suggestion:
        click.echo(click.style(f"Suggestion: {suggestion}", fg="yellow"), err=True)
    sys.exit(1)
