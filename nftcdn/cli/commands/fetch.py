import json
from enum import Enum
from pathlib import Path

import typer

from nftcdn.cli import core
from nftcdn.internal.logging import get_logger
from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey
from nftcdn.kernel.errors import GatewayError
from nftcdn.runtime.services import build_services

logger = get_logger(__name__)


class FetchTarget(str, Enum):
    OWNER = "owner"
    METADATA = "metadata"
    IMAGE = "image"


def fetch(
    target: FetchTarget = typer.Argument(..., help="What to resolve."),
    chain_id: int = typer.Argument(..., help="Chain id, e.g. 199."),
    collection: str = typer.Argument(..., help="Collection contract address."),
    token_id: int = typer.Argument(..., help="Token id."),
    out: Path = typer.Option(None, "--out", "-o", help="Write the result to this file instead of stdout."),
):
    """
    Resolve a token artifact in-process, filling the local cache on a miss.
    """
    if target is FetchTarget.IMAGE and out is None:
        typer.echo("Images are binary; pass --out FILE.")
        raise typer.Exit(2)

    services = build_services(core.load_settings())

    async def _resolve() -> bytes:
        try:
            key = ResourceKey(chain_id=chain_id, collection=collection, token_id=token_id)
            if target is FetchTarget.OWNER:
                return (await services.engine.owner_of(key)).encode("utf-8")
            if target is FetchTarget.METADATA:
                metadata = await services.engine.get_metadata(key)
                return json.dumps(metadata, indent=2).encode("utf-8")
            return await services.engine.get_artifact(ArtifactKind.IMAGE, key)
        finally:
            await services.aclose()

    try:
        data = core.run_async(_resolve())
    except GatewayError as e:
        logger.error("CLI fetch failed", target=target.value, error_kind=e.kind.value, error=str(e))
        typer.echo(typer.style(f"Unable to retrieve {target.value}: {e} [{e.kind.value}]", fg=typer.colors.RED))
        raise typer.Exit(1)

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(data)
        typer.echo(f"Wrote {len(data)} bytes to {out}")
    else:
        typer.echo(data.decode("utf-8"))


def name(
    chain_id: int = typer.Argument(..., help="Chain id, e.g. 199."),
    collection: str = typer.Argument(..., help="Collection contract address."),
):
    """
    Resolve a collection's display name in-process.
    """
    services = build_services(core.load_settings())

    async def _resolve() -> str:
        try:
            return await services.names.get_name(chain_id, collection)
        finally:
            await services.aclose()

    try:
        collection_name = core.run_async(_resolve())
    except GatewayError as e:
        logger.error("CLI name lookup failed", error_kind=e.kind.value, error=str(e))
        typer.echo(typer.style(f"Unable to retrieve collection name: {e} [{e.kind.value}]", fg=typer.colors.RED))
        raise typer.Exit(1)
    typer.echo(collection_name)
