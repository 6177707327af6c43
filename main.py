import asyncio
import logging
from typing import Optional

import typer
from hypercorn.asyncio import serve as hypercorn_serve
from hypercorn.config import Config as HypercornConfig

from clusterboot.app import create_app
from clusterboot.config import Config
from clusterboot.config.logging import setup_logging
from clusterboot.discovery import publish_or_update
from clusterboot.store import StoreError
from clusterboot.store.sql import Database, SqlStore

cli_app = typer.Typer(help="Cluster bootstrap discovery service")


@cli_app.command()
def serve(
    host: str = typer.Option("localhost", help="Host to bind the server to"),
    port: int = typer.Option(8080, help="Port to bind the server to"),
) -> None:
    """Serve the public cluster-info endpoint."""
    app = create_app()
    setup_logging(app.state.config.logging)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting clusterboot server on {host}:{port}")

    config = HypercornConfig()
    config.bind = [f"{host}:{port}"]

    asyncio.run(hypercorn_serve(app, config))  # pyright: ignore[reportArgumentType]


@cli_app.command()
def publish(
    kubeconfig: Optional[str] = typer.Option(
        None,
        "--kubeconfig",
        "-k",
        help="Client configuration to publish (defaults to bootstrap.kubeconfig_path)",
    ),
) -> None:
    """Create or update the cluster-info record."""
    config = Config()
    setup_logging(config.logging)
    path = kubeconfig or config.bootstrap.kubeconfig_path

    try:
        asyncio.run(_publish(config, path))
    except (StoreError, OSError) as e:
        typer.echo(f"Failed to publish cluster-info: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Published cluster-info from {path}")


async def _publish(config: Config, path: str) -> None:
    database = Database(config.database.url)
    await database.init_db()
    try:
        await publish_or_update(SqlStore(database), path)
    finally:
        await database.close()


if __name__ == "__main__":
    cli_app()
