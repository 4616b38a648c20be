import typer
from rich.console import Console

from nftcdn.adapters.http import fastapi_server
from nftcdn.cli import core

console = Console()


def serve(
    host: str = typer.Option(None, help="Host to bind the gateway to."),
    port: int = typer.Option(None, help="Port to bind the gateway to."),
):
    """
    Run the nftcdn gateway in the foreground.
    """
    settings = core.load_settings(host=host, port=port)
    if core.is_gateway_active(core.client_for(settings)):
        typer.echo(f"A gateway is already answering on {settings.host}:{settings.port}.")
        raise typer.Exit(1)

    console.print(f"Starting nftcdn gateway on [bold]{settings.host}:{settings.port}[/bold] (data: {settings.data_dir})")
    fastapi_server.run_server(settings)
