import sys
import uuid

import typer

from nftcdn.cli import core
from nftcdn.internal.logging import get_logger

logger = get_logger(__name__)


def doctor():
    """
    Check the nftcdn configuration and gateway health.
    """
    typer.echo("Running nftcdn doctor checks...\n")
    settings = core.load_settings()
    all_passed = True

    def check(description: str, func):
        nonlocal all_passed
        typer.echo(f"- {description}...", nl=False)
        result, message = func()
        if result:
            typer.echo(f" {typer.style('PASSED', fg=typer.colors.GREEN)}")
        else:
            typer.echo(f" {typer.style('FAILED', fg=typer.colors.RED)}")
            typer.echo(f"  Reason: {message}")
            all_passed = False

    typer.echo(typer.style("System Information:", fg=typer.colors.BLUE, bold=True))
    typer.echo(f"  Python Version: {sys.version.split()[0]}")
    typer.echo(f"  Data Directory: {settings.data_dir}")
    typer.echo(f"  Content Gateway: {settings.content_gateway} ({settings.content_scheme}://)")
    typer.echo("")

    typer.echo(typer.style("Supported Chains:", fg=typer.colors.BLUE, bold=True))
    for chain_id, endpoint in sorted(settings.chain_rpc.items()):
        typer.echo(f"  {chain_id}: {endpoint}")
    typer.echo("")

    typer.echo(typer.style("Local Storage Checks:", fg=typer.colors.BLUE, bold=True))

    def check_writable(directory):
        def _check():
            probe = directory / f".doctor-{uuid.uuid4().hex}"
            try:
                probe.write_bytes(b"ok")
                probe.unlink()
            except OSError as e:
                return False, f"Directory '{directory}' is not writable: {e}"
            return True, ""
        return _check

    check("Artifact storage directory", check_writable(settings.storage_dir))
    check("Collection name directory", check_writable(settings.names_dir))

    typer.echo(typer.style("\nGateway Checks:", fg=typer.colors.BLUE, bold=True))
    client = core.client_for(settings)
    check(
        f"Gateway reachable at {client.base_url}",
        lambda: (core.is_gateway_active(client), "No gateway answered on /health. Start one with `nftcdn serve`."),
    )

    typer.echo("\n--- Doctor Check Summary ---")
    if all_passed:
        typer.echo(typer.style("All checks PASSED!", fg=typer.colors.GREEN, bold=True))
        return
    typer.echo(typer.style("Some checks FAILED. Please review the output above.", fg=typer.colors.RED, bold=True))
    raise typer.Exit(1)
