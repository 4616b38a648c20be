import typer
import importlib.metadata


def version():
    """
    Show the nftcdn version.
    """
    try:
        package_version = importlib.metadata.version("nftcdn")
    except importlib.metadata.PackageNotFoundError:
        typer.echo("nftcdn is not installed or version metadata not found.")
        typer.echo("Please install the package first (e.g., pip install -e .)")
        raise typer.Exit(1)
    typer.echo(f"nftcdn version: {package_version}")
