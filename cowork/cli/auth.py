"""CLI commands for provider and git transport credentials.

Commands:
    - login: Store a token or username/password for a provider
    - show: Display a stored credential (masked by default)
    - list: List every stored provider credential
    - remove: Delete a provider credential
    - test: Verify a stored credential against the provider's API
    - git ssh|https|token|show|remove: Git transport credentials

Example:
    $ cowork auth login github --scope global
    $ cowork auth test github
    $ cowork auth git ssh ~/.ssh/id_ed25519 --scope project
"""

import asyncio
import sys
from pathlib import Path

import click

from cowork.auth import AuthManager
from cowork.cli.common import SCOPE_CHOICES, fail, get_settings, mask_secret
from cowork.enums import AuthScope, GitAuthMethod, ProviderType
from cowork.exceptions import CoworkError


def _manager(ctx: click.Context) -> AuthManager:
    return AuthManager.from_settings(get_settings(ctx))


@click.group(name="auth")
def auth_group():
    """Manage hosting provider and git credentials.

    Credentials are stored encrypted in the global scope (per user) or the
    project scope (per repository).

    Examples:

        cowork auth login github

        cowork auth login gitlab --base-url https://gitlab.example.com --scope project

        cowork auth list
    """
    pass


@auth_group.command(name="login")
@click.argument("provider")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.option("--base-url", help="API base URL for self-hosted or enterprise instances")
@click.option("--basic", is_flag=True, help="Store a username and password instead of a token")
@click.pass_context
def login(ctx: click.Context, provider: str, scope: str, base_url: str | None, basic: bool):
    """Store credentials for PROVIDER (github, gitlab, bitbucket)."""
    try:
        provider_type = ProviderType.parse(provider)
        auth_scope = AuthScope.parse(scope)
        manager = _manager(ctx)

        if basic:
            username = click.prompt("Username")
            password = click.prompt("Password", hide_input=True)
            manager.set_basic_auth(provider_type, username, password, auth_scope, base_url=base_url)
        else:
            token = click.prompt(f"{provider_type.display_name} token", hide_input=True)
            manager.set_token(provider_type, token, auth_scope, base_url=base_url)

        click.echo(click.style(f"{provider_type.display_name} credentials stored ({auth_scope})", fg="green"))

    except CoworkError as e:
        fail(e)


@auth_group.command(name="show")
@click.argument("provider")
@click.option("--scope", type=SCOPE_CHOICES, help="Credential scope (default: project, then global)")
@click.option("--show-value", is_flag=True, help="Show full secret (default: masked)")
@click.pass_context
def show(ctx: click.Context, provider: str, scope: str | None, show_value: bool):
    """Display the stored credential for PROVIDER."""
    try:
        provider_type = ProviderType.parse(provider)
        manager = _manager(ctx)

        if scope:
            auth_scope = AuthScope.parse(scope)
            config = manager.get_auth_config(provider_type, auth_scope)
        else:
            config, auth_scope = manager.resolve_auth_config(provider_type)

    except CoworkError as e:
        fail(e)

    click.echo(f"Provider: {config.provider_type.display_name}")
    click.echo(f"Scope: {auth_scope}")
    click.echo(f"Method: {config.auth_method}")
    if config.base_url:
        click.echo(f"Base URL: {config.base_url}")
    if config.username:
        click.echo(f"Username: {config.username}")

    secret = config.token or config.password
    if secret:
        label = "Token" if config.token else "Password"
        click.echo(f"{label}: {secret if show_value else mask_secret(secret)}")


@auth_group.command(name="list")
@click.pass_context
def list_credentials(ctx: click.Context):
    """List every stored provider credential."""
    try:
        configs = _manager(ctx).list_auth_configs()
    except CoworkError as e:
        fail(e)

    if not configs:
        click.echo(click.style("No credentials configured", fg="yellow"))
        return

    for config, scope in configs:
        base_url = f"  {config.base_url}" if config.base_url else ""
        click.echo(f"{config.provider_type.value:<10} {scope.value:<8} {config.auth_method.value}{base_url}")


@auth_group.command(name="remove")
@click.argument("provider")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.confirmation_option(prompt="Are you sure you want to remove this credential?")
@click.pass_context
def remove(ctx: click.Context, provider: str, scope: str):
    """Delete the stored credential for PROVIDER."""
    try:
        provider_type = ProviderType.parse(provider)
        _manager(ctx).remove_auth(provider_type, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style("Credential removed", fg="green"))


@auth_group.command(name="test")
@click.argument("provider")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.pass_context
def check_auth(ctx: click.Context, provider: str, scope: str):
    """Check the stored credential for PROVIDER against its API."""
    try:
        provider_type = ProviderType.parse(provider)
        auth_scope = AuthScope.parse(scope)
        asyncio.run(_manager(ctx).test_auth(provider_type, auth_scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"{provider_type.display_name} authentication OK ({auth_scope})", fg="green"))


@auth_group.group(name="git")
def git_group():
    """Manage credentials used by git itself (clone, fetch, push)."""
    pass


@git_group.command(name="ssh")
@click.argument("key_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.option("--inline", is_flag=True, help="Store the key material instead of its path")
@click.pass_context
def git_ssh(ctx: click.Context, key_file: Path, scope: str, inline: bool):
    """Use the SSH private key KEY_FILE for git."""
    try:
        manager = _manager(ctx)
        auth_scope = AuthScope.parse(scope)
        if inline:
            manager.set_git_ssh_key_auth(key_file.read_text(), auth_scope)
        else:
            manager.set_git_ssh_key_file_auth(key_file.expanduser().resolve(), auth_scope)
    except OSError as e:
        click.echo(click.style(f"Error: cannot read {key_file}: {e.strerror}", fg="red"), err=True)
        sys.exit(1)
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"Git SSH key stored ({scope})", fg="green"))


@git_group.command(name="https")
@click.option("--username", prompt=True, help="HTTPS username")
@click.option("--password", prompt=True, hide_input=True, help="HTTPS password (will prompt if not provided)")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.pass_context
def git_https(ctx: click.Context, username: str, password: str, scope: str):
    """Use an HTTPS username and password for git."""
    try:
        _manager(ctx).set_git_https_auth(username, password, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"Git HTTPS credentials stored ({scope})", fg="green"))


@git_group.command(name="token")
@click.option("--token", prompt=True, hide_input=True, help="Access token (will prompt if not provided)")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.pass_context
def git_token(ctx: click.Context, token: str, scope: str):
    """Use an access token for git."""
    try:
        _manager(ctx).set_git_token_auth(token, AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style(f"Git token stored ({scope})", fg="green"))


@git_group.command(name="show")
@click.option("--scope", type=SCOPE_CHOICES, help="Credential scope (default: project, then global)")
@click.option("--show-value", is_flag=True, help="Show full secret (default: masked)")
@click.pass_context
def git_show(ctx: click.Context, scope: str | None, show_value: bool):
    """Display the stored git credential."""
    try:
        manager = _manager(ctx)
        if scope:
            auth_scope = AuthScope.parse(scope)
            config = manager.get_git_auth_config(auth_scope)
        else:
            config, auth_scope = manager.resolve_git_auth_config()
    except CoworkError as e:
        fail(e)

    click.echo(f"Scope: {auth_scope}")
    click.echo(f"Method: {config.auth_method}")

    if config.auth_method == GitAuthMethod.SSH:
        if config.ssh_key_path:
            click.echo(f"Key file: {config.ssh_key_path}")
        elif config.ssh_key:
            click.echo("Key: (inline)")
    elif config.auth_method == GitAuthMethod.HTTPS:
        click.echo(f"Username: {config.username}")
        password = config.password or ""
        click.echo(f"Password: {password if show_value else mask_secret(password)}")
    elif config.auth_method == GitAuthMethod.TOKEN:
        token = config.token or ""
        click.echo(f"Token: {token if show_value else mask_secret(token)}")


@git_group.command(name="remove")
@click.option("--scope", type=SCOPE_CHOICES, default="global", show_default=True, help="Credential scope")
@click.confirmation_option(prompt="Are you sure you want to remove the git credential?")
@click.pass_context
def git_remove(ctx: click.Context, scope: str):
    """Delete the stored git credential."""
    try:
        _manager(ctx).remove_git_auth(AuthScope.parse(scope))
    except CoworkError as e:
        fail(e)

    click.echo(click.style("Git credential removed", fg="green"))
