"""
This module defines the read-through resolution service of the nftcdn kernel.
It decides whether an artifact is already materialized and, when it is not,
orchestrates the chain read and content fetch, then persists the result
before handing it back.
"""
import asyncio
import json
from functools import partial
from typing import Any, Awaitable, Callable, Dict

from nftcdn.internal.logging import get_logger
from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey, derive_key_path
from nftcdn.kernel.contracts import ArtifactStore, ChainReader, ContentResolver, ResolutionResult
from nftcdn.kernel.errors import ContentFetchError, GatewayError, MetadataFieldMissing, NotFound

logger = get_logger(__name__)

IMAGE_FIELD = "image"


class ResolutionEngine:
    """
    Orchestrates artifact resolution: CheckCache, then on a miss ChainFetch,
    ContentFetch and Persist.

    Concurrent cold misses for the same storage path share one in-flight
    task. Nothing is written unless the whole two-hop fetch succeeds, so a
    failed resolution simply repeats on the next request.
    """
    def __init__(self, store: ArtifactStore, chain_reader: ChainReader, content_resolver: ContentResolver):
        self.store = store
        self.chain_reader = chain_reader
        self.content_resolver = content_resolver
        self._in_flight: Dict[str, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def owner_of(self, key: ResourceKey) -> str:
        # Ownership changes over time, so it is never cached.
        return await self.chain_reader.owner_of(key.chain_id, key.collection, key.token_id)

    async def get_artifact(self, kind: ArtifactKind, key: ResourceKey) -> bytes:
        kind = ArtifactKind(kind)
        if kind is ArtifactKind.METADATA:
            materialize = partial(self._materialize_metadata, key)
        else:
            materialize = partial(self._materialize_image, key)
        return await self._read_through(kind, key, materialize)

    async def get_metadata(self, key: ResourceKey) -> Any:
        return json.loads(await self.get_artifact(ArtifactKind.METADATA, key))

    async def get_image(self, key: ResourceKey) -> bytes:
        return await self.get_artifact(ArtifactKind.IMAGE, key)

    async def resolve(self, kind: ArtifactKind, key: ResourceKey) -> ResolutionResult:
        """
        Same as get_artifact, but reports failures as a typed result instead
        of raising.
        """
        kind = ArtifactKind(kind)
        try:
            data = await self.get_artifact(kind, key)
        except GatewayError as exc:
            logger.warning("Resolution failed", key=str(key), kind=kind.value, error_kind=exc.kind.value, error=str(exc))
            return ResolutionResult.failure(key, kind, exc)
        return ResolutionResult.success(key, kind, data)

    # ------------------------------------------------------------------
    # Read-through
    # ------------------------------------------------------------------

    async def _read_through(self, kind: ArtifactKind, key: ResourceKey, materialize: Callable[[], Awaitable[bytes]]) -> bytes:
        path = derive_key_path(kind, key)

        if self.store.exists(path):
            try:
                data = self.store.read(path)
            except NotFound:
                logger.warning("Cached artifact vanished before read", path=path)
            else:
                logger.debug(f"{kind.value.capitalize()} retrieved from cache", key=str(key), path=path)
                return data

        task = self._in_flight.get(path)
        if task is None:
            logger.info("Cache miss, resolving", key=str(key), kind=kind.value)
            task = asyncio.ensure_future(self._materialize_and_persist(path, materialize))
            self._in_flight[path] = task
        else:
            logger.info("Joining in-flight resolution", key=str(key), kind=kind.value)

        # A cancelled requester must not cancel the work other requesters share.
        return await asyncio.shield(task)

    async def _materialize_and_persist(self, path: str, materialize: Callable[[], Awaitable[bytes]]) -> bytes:
        try:
            data = await materialize()
            self.store.write(path, data)
            logger.info("Artifact persisted", path=path, size=len(data))
            return data
        finally:
            self._in_flight.pop(path, None)

    # ------------------------------------------------------------------
    # Miss paths
    # ------------------------------------------------------------------

    async def _materialize_metadata(self, key: ResourceKey) -> bytes:
        metadata_uri = await self.chain_reader.token_uri(key.chain_id, key.collection, key.token_id)
        data = await self.content_resolver.resolve(metadata_uri)
        try:
            json.loads(data)
        except ValueError as exc:
            raise ContentFetchError(f"Metadata at {metadata_uri} is not valid JSON") from exc
        return data

    async def _materialize_image(self, key: ResourceKey) -> bytes:
        # Image resolution is layered on metadata resolution, cached or cold.
        metadata = await self.get_metadata(key)
        location = metadata.get(IMAGE_FIELD) if isinstance(metadata, dict) else None
        if not isinstance(location, str) or not location.strip():
            raise MetadataFieldMissing(IMAGE_FIELD)
        return await self.content_resolver.resolve(location.strip())
