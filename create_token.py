#!/usr/bin/env python3
"""CLI script to create bootstrap tokens for joining nodes."""

import asyncio
from datetime import timedelta
from typing import List, Optional

import typer

from clusterboot.config import Config
from clusterboot.config.logging import setup_logging
from clusterboot.store import StoreError
from clusterboot.store.sql import Database, SqlStore
from clusterboot.tokens import (
    BootstrapToken,
    generate_token,
    parse_token,
    update_or_create_token,
)

# Ten years
MAX_TTL_HOURS = 24 * 365 * 10

app = typer.Typer(help="Create bootstrap tokens for joining nodes")


@app.command()
def create(
    token: Optional[str] = typer.Argument(
        None, help="Token to store as <id>.<secret> (generated if omitted)"
    ),
    ttl_hours: Optional[int] = typer.Option(
        None,
        "--ttl-hours",
        "-t",
        min=0,
        max=MAX_TTL_HOURS,
        help="Token lifetime in hours, 0 for no expiration (defaults to config)",
    ),
    usages: Optional[List[str]] = typer.Option(
        None,
        "--usage",
        "-u",
        help="Allowed usage, may be repeated (defaults to config)",
    ),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Description attached to the token"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only output the token without additional information",
    ),
) -> None:
    """Create a new bootstrap token and print it to stdout."""
    config = Config()
    if not quiet:
        setup_logging(config.logging)

    bootstrap = config.bootstrap
    fields = dict(
        ttl=timedelta(
            hours=ttl_hours if ttl_hours is not None else bootstrap.token_ttl_hours
        ),
        usages=usages or bootstrap.token_usages,
        description=description
        if description is not None
        else bootstrap.token_description,
        groups=bootstrap.token_groups,
    )

    try:
        bootstrap_token = (
            parse_token(token, **fields) if token else generate_token(**fields)
        )
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    try:
        asyncio.run(_store_token(config, bootstrap_token))
    except StoreError as e:
        typer.echo(f"Failed to store token: {e}", err=True)
        raise typer.Exit(code=1)

    if quiet:
        typer.echo(bootstrap_token.token_string)
        return

    typer.echo("Token created successfully!\n")
    typer.echo(f"  ID:         {bootstrap_token.id}")
    typer.echo(f"  Secret:     {bootstrap_token.secret_name}")
    typer.echo(f"  Usages:     {', '.join(bootstrap_token.usages) or 'none'}")
    if bootstrap_token.ttl > timedelta(0):
        typer.echo(f"  Expires in: {bootstrap_token.ttl}")
    else:
        typer.echo("  Expires:    Never")
    typer.echo(f"\n  Token:      {bootstrap_token.token_string}")


async def _store_token(config: Config, token: BootstrapToken) -> None:
    database = Database(config.database.url)
    await database.init_db()
    try:
        await update_or_create_token(SqlStore(database), token)
    finally:
        await database.close()


if __name__ == "__main__":
    app()
