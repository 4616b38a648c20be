"""
ContentResolver that dereferences metadata and image locations over HTTP(S),
rewriting content-addressed URIs onto a public gateway first.
"""
import base64
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx

from nftcdn.internal.constants import CONTENT_ADDRESSED_SCHEME, CONTENT_TIMEOUT_SECONDS, DEFAULT_CONTENT_GATEWAY
from nftcdn.internal.logging import get_logger
from nftcdn.kernel.contracts import ContentResolver
from nftcdn.kernel.errors import ContentFetchError

logger = get_logger(__name__)


def translate(location_uri: str, scheme: str = CONTENT_ADDRESSED_SCHEME, gateway: str = DEFAULT_CONTENT_GATEWAY) -> str:
    """
    Rewrite ``<scheme>://X/Y`` to ``<gateway>/<scheme>/X/Y``; any other URI
    is returned unmodified.
    """
    prefix = f"{scheme}://"
    if location_uri.startswith(prefix):
        return f"{gateway.rstrip('/')}/{scheme}/{location_uri[len(prefix):]}"
    return location_uri


def decode_data_uri(location_uri: str) -> bytes:
    """Decode an RFC 2397 ``data:`` URI into its payload bytes."""
    header, sep, payload = location_uri[len("data:"):].partition(",")
    if not sep:
        raise ContentFetchError("Malformed data URI: missing ','")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except ValueError as exc:
            raise ContentFetchError("Malformed base64 payload in data URI") from exc
    return unquote_to_bytes(payload)


class HttpContentResolver(ContentResolver):
    """
    Fetches content with a shared httpx.AsyncClient. The client is created
    lazily unless one is injected, and must be released with aclose().
    """
    def __init__(
        self,
        gateway: str = DEFAULT_CONTENT_GATEWAY,
        scheme: str = CONTENT_ADDRESSED_SCHEME,
        timeout: float = CONTENT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.gateway = gateway.rstrip("/")
        self.scheme = scheme
        self.timeout = timeout
        self._client = client

    def translate(self, location_uri: str) -> str:
        return translate(location_uri, self.scheme, self.gateway)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def resolve(self, location_uri: str) -> bytes:
        if location_uri.startswith("data:"):
            content = decode_data_uri(location_uri)
        else:
            content = await self._fetch(self.translate(location_uri))

        if not content:
            raise ContentFetchError(f"Empty body for {location_uri}")
        return content

    async def _fetch(self, url: str) -> bytes:
        try:
            response = await self._get_client().get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.TimeoutException as exc:
            raise ContentFetchError(f"Timed out fetching {url}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Content fetch failed", url=url, error=str(exc))
            raise ContentFetchError(f"Failed to fetch {url}: {exc}") from exc

        if not response.is_success:
            raise ContentFetchError(f"Gateway returned {response.status_code} for {url}")

        logger.debug("Content fetched", url=url, size=len(response.content))
        return response.content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def __repr__(self) -> str:
        return f"<HttpContentResolver gateway={self.gateway} scheme={self.scheme}>"
