#!/usr/bin/env python3
import logging

import click
import requests
import yaml
import json
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.prompt import Prompt
from vaultkv import VaultError, VaultNotFoundError, new_client
from vaultkv.factory import MOCK_SCHEME
from config import CLIConfig

console = Console()

CLIENT_ERRORS = (VaultError, requests.RequestException)


def get_client(ctx: click.Context):
    """Get authenticated client for the configured address or mock fixture"""
    mock = ctx.obj.get('mock')
    if mock:
        try:
            return new_client(MOCK_SCHEME + mock)
        except (VaultError, OSError, yaml.YAMLError) as e:
            console.print(f"[red]Error: Cannot load fixture '{mock}': {str(e)}[/red]")
            raise click.Abort()

    token = CLIConfig.get_token()
    if not token:
        console.print("[red]Error: Not authenticated. Run 'vaultkv login' or set VAULT_TOKEN.[/red]")
        raise click.Abort()

    try:
        return new_client(ctx.obj['address'], token=token)
    except VaultError as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise click.Abort()


def parse_fields(field_strings: tuple) -> dict:
    """Parse field strings like 'user=app' into dict"""
    fields = {}
    for field_str in field_strings:
        if '=' not in field_str:
            raise click.BadParameter(f"expected KEY=VALUE, got '{field_str}'")
        key, value = field_str.split('=', 1)
        fields[key.strip()] = value
    return fields


@click.group()
@click.version_option(version='1.0.0')
@click.option('--address', envvar='VAULT_ADDR', help='Vault address (default from config)')
@click.option('--mock', type=click.Path(allow_dash=True), help="Use an in-memory store seeded from a fixture ('-' for empty)")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, address, mock, verbose):
    """vaultkv - Vault KV v1 secrets client"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj['address'] = address or CLIConfig.get_address()
    ctx.obj['mock'] = mock


# ============ Auth Commands ============

@cli.command()
@click.option('--token', help='Vault token (prompted if omitted)')
@click.option('--address', 'save_address', help='Also store this Vault address in config')
def login(token, save_address):
    """Store a Vault token in the keychain"""
    if not token:
        token = Prompt.ask("Token", password=True)
    if not token:
        console.print("[red]Error: Token must not be empty[/red]")
        raise click.Abort()

    try:
        CLIConfig.set_token(token)
    except RuntimeError as e:
        console.print(f"[red]{str(e)}[/red]")
        raise click.Abort()

    if save_address:
        CLIConfig.set_address(save_address)
    console.print("[green]Token stored successfully[/green]")


@cli.command()
def logout():
    """Remove stored token"""
    CLIConfig.delete_token()
    console.print("[green]Logged out successfully[/green]")


@cli.command()
@click.pass_context
def whoami(ctx):
    """Show current address and authentication state"""
    console.print("[cyan]Current session:[/cyan]")
    console.print(f"  Address: [green]{ctx.obj['address']}[/green]")
    if CLIConfig.is_authenticated():
        console.print("  Authenticated: [green]Yes[/green]")
    else:
        console.print("  Authenticated: [yellow]No[/yellow]")


# ============ Secret Commands ============

@cli.command('list')
@click.argument('path')
@click.option('--output', '-o', type=click.Choice(['text', 'json']), default='text', help='Output format')
@click.pass_context
def list_secrets(ctx, path, output):
    """List secrets under a path"""
    client = get_client(ctx)

    try:
        keys = client.list_secrets(path)
    except CLIENT_ERRORS as e:
        console.print(f"[red]Failed to list secrets: {str(e)}[/red]")
        raise click.Abort()

    if output == 'json':
        print(json.dumps(keys))
        return

    table = Table(title=f"{path.rstrip('/')}/ ({len(keys)})")
    table.add_column("Key", style="cyan")
    table.add_column("Type", style="dim")
    for key in keys:
        table.add_row(key, "directory" if key.endswith('/') else "secret")
    console.print(table)


@cli.command('read')
@click.argument('path')
@click.option('--field', '-f', help='Print only this field value')
@click.option('--output', '-o', type=click.Choice(['text', 'json', 'yaml']), default='text', help='Output format')
@click.pass_context
def read_secret(ctx, path, field, output):
    """Read a secret"""
    client = get_client(ctx)

    try:
        secret = client.read_secret(path)
    except VaultNotFoundError:
        console.print(f"[red]Secret '{path}' not found[/red]")
        raise click.Abort()
    except CLIENT_ERRORS as e:
        console.print(f"[red]Failed to read secret: {str(e)}[/red]")
        raise click.Abort()

    if field:
        if field not in secret:
            console.print(f"[red]Field '{field}' not present in '{path}'[/red]")
            raise click.Abort()
        value = secret[field]
        print(value if isinstance(value, str) else json.dumps(value))
    elif output == 'json':
        print(json.dumps(secret, indent=2))
    elif output == 'yaml':
        print(yaml.safe_dump(secret, default_flow_style=False, sort_keys=False), end='')
    else:
        table = Table(title=path)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="yellow")
        for key, value in secret.items():
            table.add_row(str(key), value if isinstance(value, str) else json.dumps(value))
        console.print(table)


@cli.command('write')
@click.argument('path')
@click.argument('fields', nargs=-1)
@click.option('--json-file', type=click.Path(exists=True), help='Read secret data from a JSON or YAML file')
@click.pass_context
def write_secret(ctx, path, fields, json_file):
    """Create or replace a secret (KEY=VALUE ...)"""
    if json_file:
        with open(json_file, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            console.print(f"[red]{json_file} must contain a mapping[/red]")
            raise click.Abort()
    else:
        data = {}
    data.update(parse_fields(fields))

    if not data:
        console.print("[red]Error: No secret data given[/red]")
        raise click.Abort()

    client = get_client(ctx)
    try:
        client.write_secret(path, data)
    except CLIENT_ERRORS as e:
        console.print(f"[red]Failed to write secret: {str(e)}[/red]")
        raise click.Abort()
    console.print(f"[green]Wrote secret: {path}[/green]")


@cli.command('delete')
@click.argument('path')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
@click.pass_context
def delete_secret(ctx, path, force):
    """Delete a secret"""
    if not force and not click.confirm(f"Delete secret '{path}'?"):
        return

    client = get_client(ctx)
    try:
        client.delete_secret(path)
    except CLIENT_ERRORS as e:
        console.print(f"[red]Failed to delete secret: {str(e)}[/red]")
        raise click.Abort()
    console.print(f"[green]Deleted secret: {path}[/green]")


if __name__ == '__main__':
    cli()
