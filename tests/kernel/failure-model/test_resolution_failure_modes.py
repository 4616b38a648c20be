import json

import pytest

from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey, derive_key_path
from nftcdn.kernel.errors import (
    ChainReadError,
    ContentFetchError,
    ErrorKind,
    MetadataFieldMissing,
    UnsupportedChain,
)
from tests.kernel.mocks import COLLECTION, IMAGE_URI, METADATA_URI


async def test_token_uri_failure_raises_and_writes_nothing(engine, store, chain_reader, content_resolver, key):
    chain_reader.force_error = True

    with pytest.raises(ChainReadError):
        await engine.get_artifact(ArtifactKind.METADATA, key)

    assert not store.exists(derive_key_path(ArtifactKind.METADATA, key))
    assert store.writes == []
    assert content_resolver.resolve_calls == []


async def test_unsupported_chain_propagates_untranslated(engine, store):
    key = ResourceKey(chain_id=1, collection=COLLECTION, token_id=1)
    with pytest.raises(UnsupportedChain, match="Chain ID 1 is not supported"):
        await engine.get_metadata(key)
    assert store.writes == []


async def test_content_failure_writes_nothing(engine, store, content_resolver, key):
    del content_resolver.contents[METADATA_URI]

    with pytest.raises(ContentFetchError):
        await engine.get_artifact(ArtifactKind.METADATA, key)
    assert store.writes == []


async def test_non_json_metadata_is_never_persisted(engine, store, content_resolver, key):
    content_resolver.contents[METADATA_URI] = b"<html>gateway error page</html>"

    with pytest.raises(ContentFetchError, match="not valid JSON"):
        await engine.get_artifact(ArtifactKind.METADATA, key)
    assert store.writes == []


@pytest.mark.parametrize("metadata", [{"name": "no image"}, {"image": ""}, {"image": 42}, ["not", "an", "object"]])
async def test_missing_image_field_skips_content_fetch(engine, store, content_resolver, key, metadata):
    content_resolver.contents[METADATA_URI] = json.dumps(metadata).encode()

    with pytest.raises(MetadataFieldMissing):
        await engine.get_image(key)

    assert content_resolver.resolve_calls == [METADATA_URI]
    assert not store.exists(derive_key_path(ArtifactKind.IMAGE, key))


async def test_image_fetch_failure_keeps_metadata_but_not_image(engine, store, content_resolver, key):
    del content_resolver.contents[IMAGE_URI]

    with pytest.raises(ContentFetchError):
        await engine.get_image(key)

    assert store.exists(derive_key_path(ArtifactKind.METADATA, key))
    assert not store.exists(derive_key_path(ArtifactKind.IMAGE, key))


async def test_failed_resolution_self_heals_on_retry(engine, store, chain_reader, key):
    chain_reader.force_error = True
    with pytest.raises(ChainReadError):
        await engine.get_metadata(key)

    chain_reader.force_error = False
    assert await engine.get_metadata(key)
    assert store.exists(derive_key_path(ArtifactKind.METADATA, key))
    assert len(chain_reader.token_uri_calls) == 2


async def test_resolve_reports_error_kind(engine, content_resolver, key):
    content_resolver.contents[METADATA_URI] = b'{"name": "no image"}'

    result = await engine.resolve(ArtifactKind.IMAGE, key)

    assert not result.ok
    assert result.error is ErrorKind.METADATA_FIELD_MISSING
    assert result.data is None


async def test_store_write_failure_propagates(engine, store, key, mocker):
    mocker.patch.object(store, "write", side_effect=OSError(28, "No space left on device"))

    with pytest.raises(OSError, match="No space left on device"):
        await engine.get_metadata(key)
    assert not store.exists(derive_key_path(ArtifactKind.METADATA, key))
