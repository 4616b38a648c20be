import typer

from nftcdn.cli.commands import (
    doctor,
    fetch,
    serve,
    status,
    version,
)

app = typer.Typer(
    name="nftcdn",
    help="A read-through cache and gateway for NFT metadata and images.",
    no_args_is_help=True
)

app.command("serve")(serve.serve)
app.command("status")(status.status)
app.command("doctor")(doctor.doctor)
app.command("fetch")(fetch.fetch)
app.command("name")(fetch.name)
app.command("version")(version.version)

if __name__ == "__main__":
    app()
