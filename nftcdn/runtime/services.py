"""
Assembles the kernel services from settings: filesystem stores, the web3
chain reader and the HTTP content resolver.
"""
from dataclasses import dataclass

from nftcdn.adapters.chain_web3 import Web3ChainReader
from nftcdn.adapters.content_http import HttpContentResolver
from nftcdn.adapters.storage_fs import FileSystemArtifactStore
from nftcdn.internal.config import GatewaySettings
from nftcdn.internal.logging import get_logger
from nftcdn.kernel.names import NameCache
from nftcdn.kernel.resolution import ResolutionEngine

logger = get_logger(__name__)


@dataclass
class GatewayServices:
    engine: ResolutionEngine
    names: NameCache
    content_resolver: HttpContentResolver | None = None
    chain_reader: Web3ChainReader | None = None

    async def aclose(self) -> None:
        if self.content_resolver is not None:
            await self.content_resolver.aclose()
        if self.chain_reader is not None:
            await self.chain_reader.aclose()


def build_services(settings: GatewaySettings) -> GatewayServices:
    chain_reader = Web3ChainReader(settings.chain_rpc, timeout=settings.chain_timeout)
    content_resolver = HttpContentResolver(
        gateway=settings.content_gateway,
        scheme=settings.content_scheme,
        timeout=settings.content_timeout,
    )
    engine = ResolutionEngine(
        store=FileSystemArtifactStore(settings.storage_dir),
        chain_reader=chain_reader,
        content_resolver=content_resolver,
    )
    names = NameCache(store=FileSystemArtifactStore(settings.names_dir), chain_reader=chain_reader)
    logger.info(
        "Gateway services ready",
        data_dir=str(settings.data_dir),
        chains=sorted(settings.chain_rpc),
        content_gateway=settings.content_gateway,
    )
    return GatewayServices(
        engine=engine,
        names=names,
        content_resolver=content_resolver,
        chain_reader=chain_reader,
    )
