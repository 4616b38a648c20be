"""
ChainReader backed by web3.py's async JSON-RPC provider.
"""
import asyncio
from typing import Any, Dict, Mapping

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from nftcdn.adapters.erc721_abi import ERC721_ENUMERABLE_ABI
from nftcdn.internal.constants import CHAIN_TIMEOUT_SECONDS
from nftcdn.internal.logging import get_logger
from nftcdn.kernel.contracts import ChainReader
from nftcdn.kernel.errors import ChainReadError, UnsupportedChain

logger = get_logger(__name__)


class Web3ChainReader(ChainReader):
    """
    Resolves ownerOf / tokenURI / name through a static chain id -> RPC
    endpoint table. Every call is bounded by ``timeout`` seconds; nothing is
    retried or cached here.
    """
    def __init__(self, rpc_endpoints: Mapping[int, str], timeout: float = CHAIN_TIMEOUT_SECONDS):
        self._rpc_endpoints = dict(rpc_endpoints)
        self._timeout = timeout
        self._providers: Dict[int, AsyncWeb3] = {}

    @property
    def supported_chains(self) -> Dict[int, str]:
        return dict(self._rpc_endpoints)

    def _provider(self, chain_id: int) -> AsyncWeb3:
        provider = self._providers.get(chain_id)
        if provider is None:
            endpoint = self._rpc_endpoints.get(chain_id)
            if endpoint is None:
                raise UnsupportedChain(chain_id)
            provider = AsyncWeb3(AsyncHTTPProvider(endpoint))
            self._providers[chain_id] = provider
        return provider

    async def aclose(self) -> None:
        providers, self._providers = list(self._providers.values()), {}
        for w3 in providers:
            await w3.provider.disconnect()

    def _contract(self, chain_id: int, collection: str):
        w3 = self._provider(chain_id)
        return w3.eth.contract(address=Web3.to_checksum_address(collection), abi=ERC721_ENUMERABLE_ABI)

    async def _call(self, chain_id: int, collection: str, function: str, *args) -> Any:
        contract = self._contract(chain_id, collection)
        try:
            return await asyncio.wait_for(
                contract.functions[function](*args).call(),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ChainReadError(f"{function} on {collection} (chain {chain_id}) timed out after {self._timeout}s") from exc
        except Exception as exc:
            # web3 surfaces reverts, RPC errors, transport failures and ABI
            # decoding failures as unrelated exception types.
            logger.warning("Chain call failed", chain_id=chain_id, collection=collection, function=function, error=str(exc))
            raise ChainReadError(f"{function} on {collection} (chain {chain_id}) failed: {exc}") from exc

    async def owner_of(self, chain_id: int, collection: str, token_id: int) -> str:
        owner = await self._call(chain_id, collection, "ownerOf", token_id)
        if not isinstance(owner, str) or not Web3.is_address(owner):
            raise ChainReadError(f"ownerOf returned a malformed address: {owner!r}")
        return owner

    async def token_uri(self, chain_id: int, collection: str, token_id: int) -> str:
        uri = await self._call(chain_id, collection, "tokenURI", token_id)
        if not isinstance(uri, str) or not uri:
            raise ChainReadError(f"tokenURI returned an empty or malformed value: {uri!r}")
        return uri

    async def name(self, chain_id: int, collection: str) -> str:
        collection_name = await self._call(chain_id, collection, "name")
        if not isinstance(collection_name, str):
            raise ChainReadError(f"name returned a malformed value: {collection_name!r}")
        return collection_name
