"""CLI commands for the encrypted environment-variable store."""

import click

from cowork.cli.common import SCOPE_CHOICES, fail, get_settings, mask_secret
from cowork.config.env import EnvStore
from cowork.enums import AuthScope
from cowork.exceptions import CoworkError


def _env_store(ctx: click.Context) -> EnvStore:
    return EnvStore.from_settings(get_settings(ctx))


@click.group(name="env")
def env_group():
    """Manage encrypted environment variables.

    Variables default to the project scope. Reads without --scope fall back
    from project to global.

    Examples:

        cowork env set API_KEY

        cowork env load .env.local --scope global

        cowork env get API_KEY --show-value
    """
    pass


@env_group.command(name="set")
@click.argument("key")
@click.option("--value", prompt=True, hide_input=True, help="Variable value (will prompt if not provided)")
@click.option("--scope", type=SCOPE_CHOICES, default="project", show_default=True, help="Variable scope")
@click.pass_context
def set_var(ctx: click.Context, key: str, value: str, scope: str):
    """Store variable KEY."""
    try:
        _env_store(ctx).set_env_var(key, value, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"{key} stored ({scope})", fg="green"))


@env_group.command(name="get")
@click.argument("key")
@click.option("--scope", type=SCOPE_CHOICES, help="Variable scope (default: project, then global)")
@click.option("--show-value", is_flag=True, help="Show full value (default: masked)")
@click.pass_context
def get_var(ctx: click.Context, key: str, scope: str | None, show_value: bool):
    """Display variable KEY."""
    try:
        env_store = _env_store(ctx)
        if scope:
            auth_scope = AuthScope.parse(scope)
            value = env_store.get_env_var(key, auth_scope)
        else:
            value, auth_scope = env_store.get_env_var_with_fallback(key)
    except CoworkError as e:
        fail(e)

    click.echo(f"{key}={value if show_value else mask_secret(value)} ({auth_scope})")


@env_group.command(name="list")
@click.option("--scope", type=SCOPE_CHOICES, default="project", show_default=True, help="Variable scope")
@click.option("--show-value", is_flag=True, help="Show full values (default: masked)")
@click.pass_context
def list_vars(ctx: click.Context, scope: str, show_value: bool):
    """List the variables of a scope."""
    try:
        variables = _env_store(ctx).get_env_vars(AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    if not variables:
        click.echo(click.style(f"No variables in {scope} scope", fg="yellow"))
        return

    for key, value in sorted(variables.items()):
        click.echo(f"{key}={value if show_value else mask_secret(value)}")


@env_group.command(name="delete")
@click.argument("key")
@click.option("--scope", type=SCOPE_CHOICES, default="project", show_default=True, help="Variable scope")
@click.confirmation_option(prompt="Are you sure you want to delete this variable?")
@click.pass_context
def delete_var(ctx: click.Context, key: str, scope: str):
    """Delete variable KEY."""
    try:
        _env_store(ctx).delete_env_var(key, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"{key} deleted ({scope})", fg="green"))


@env_group.command(name="load")
@click.argument("env_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scope", type=SCOPE_CHOICES, default="project", show_default=True, help="Variable scope")
@click.pass_context
def load_file(ctx: click.Context, env_file: str, scope: str):
    """Import every KEY=VALUE line of ENV_FILE."""
    try:
        count = _env_store(ctx).set_env_from_file(env_file, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"Loaded {count} variable(s) into {scope} scope", fg="green"))
