import asyncio

import pytest

from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey, derive_key_path
from nftcdn.kernel.errors import ChainReadError
from tests.kernel.mocks import COLLECTION, IMAGE_BYTES, IMAGE_URI, METADATA_URI


@pytest.fixture(autouse=True)
def slow_upstreams(chain_reader, content_resolver):
    chain_reader.delay = 0.02
    content_resolver.delay = 0.02


async def test_concurrent_cold_misses_share_one_fetch(engine, store, chain_reader, content_resolver, key):
    results = await asyncio.gather(*(engine.get_artifact(ArtifactKind.METADATA, key) for _ in range(5)))

    assert len(set(results)) == 1
    assert len(chain_reader.token_uri_calls) == 1
    assert content_resolver.resolve_calls == [METADATA_URI]
    assert store.writes == [derive_key_path(ArtifactKind.METADATA, key)]
    assert engine._in_flight == {}


async def test_concurrent_image_requests_resolve_metadata_once(engine, chain_reader, content_resolver, key):
    results = await asyncio.gather(*(engine.get_image(key) for _ in range(3)))

    assert results == [IMAGE_BYTES] * 3
    assert len(chain_reader.token_uri_calls) == 1
    assert content_resolver.resolve_calls == [METADATA_URI, IMAGE_URI]


async def test_distinct_keys_are_not_coalesced(engine, chain_reader, content_resolver):
    chain_reader.token_uris[2] = METADATA_URI
    keys = [ResourceKey(199, COLLECTION, 1), ResourceKey(199, COLLECTION, 2)]

    await asyncio.gather(*(engine.get_metadata(k) for k in keys))

    assert sorted(call[2] for call in chain_reader.token_uri_calls) == [1, 2]


async def test_shared_failure_reaches_every_waiter_and_clears(engine, store, chain_reader, key):
    chain_reader.force_error = True

    results = await asyncio.gather(*(engine.get_metadata(key) for _ in range(3)), return_exceptions=True)

    assert all(isinstance(r, ChainReadError) for r in results)
    assert len(chain_reader.token_uri_calls) == 1
    assert engine._in_flight == {}
    assert store.writes == []

    chain_reader.force_error = False
    assert await engine.get_metadata(key)


async def test_cancelled_requester_does_not_cancel_shared_work(engine, store, key):
    first = asyncio.create_task(engine.get_artifact(ArtifactKind.METADATA, key))
    second = asyncio.create_task(engine.get_artifact(ArtifactKind.METADATA, key))
    await asyncio.sleep(0)

    first.cancel()
    data = await second

    assert first.cancelled()
    assert data
    assert store.exists(derive_key_path(ArtifactKind.METADATA, key))
