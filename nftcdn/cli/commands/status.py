import typer
import json

from nftcdn.cli import core
from nftcdn.internal.logging import get_logger

logger = get_logger(__name__)


def status(
    host: str = typer.Option(None, help="Gateway host."),
    port: int = typer.Option(None, help="Gateway port."),
):
    """
    Get the health of a running nftcdn gateway.
    """
    settings = core.load_settings(host=host, port=port)
    client = core.client_for(settings)
    typer.echo(f"Checking nftcdn gateway at {client.base_url}...")
    try:
        health = core.run_async(client.health())
    except Exception as e:
        typer.echo(f"Could not connect to nftcdn gateway. Is it running? Error: {e}")
        logger.error("Error checking gateway status", error=str(e))
        raise typer.Exit(1)

    typer.echo(json.dumps(health, indent=2))
