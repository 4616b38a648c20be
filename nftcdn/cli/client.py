import httpx

from nftcdn.internal.constants import GATEWAY_HOST, GATEWAY_PORT
from nftcdn.internal.logging import get_logger

logger = get_logger(__name__)


class GatewayClient:
    """
    Thin async client for a running nftcdn gateway.
    """

    def __init__(self, host: str = GATEWAY_HOST, port: int = GATEWAY_PORT, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = f"http://{host}:{port}"
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout, transport=self._transport)

    async def _get_json(self, path: str) -> dict:
        async with self._client() as client:
            r = await client.get(path)
            r.raise_for_status()
            return r.json()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def health(self) -> dict:
        return await self._get_json("/health")

    async def owner(self, chain_id: int, collection: str, token_id: int) -> str:
        return (await self._get_json(f"/owner/{chain_id}/{collection}/{token_id}"))["owner"]

    async def metadata(self, chain_id: int, collection: str, token_id: int) -> dict:
        return await self._get_json(f"/metadata/{chain_id}/{collection}/{token_id}")

    async def name(self, chain_id: int, collection: str) -> str:
        return (await self._get_json(f"/name/{chain_id}/{collection}/"))["name"]

    async def image(self, chain_id: int, collection: str, token_id: int) -> bytes:
        async with self._client() as client:
            r = await client.get(f"/image/{chain_id}/{collection}/{token_id}")
            r.raise_for_status()
            return r.content

    def __repr__(self) -> str:
        return f"<GatewayClient base_url={self.base_url}>"
