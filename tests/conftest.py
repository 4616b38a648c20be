import json

import pytest

from nftcdn.adapters.storage_memory import InMemoryArtifactStore
from nftcdn.internal.logging import setup_logging
from nftcdn.kernel.artifacts import ResourceKey
from nftcdn.kernel.names import NameCache
from nftcdn.kernel.resolution import ResolutionEngine
from tests.kernel.mocks import (
    COLLECTION,
    IMAGE_BYTES,
    IMAGE_URI,
    METADATA,
    METADATA_URI,
    MockChainReader,
    MockContentResolver,
)


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Configure structlog once, before any module logger is first used."""
    setup_logging("DEBUG")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test's data directory and settings out of the real home."""
    monkeypatch.setenv("NFTCDN_HOME", str(tmp_path / "nftcdn_home"))
    for var in ("NFTCDN_HOST", "NFTCDN_PORT", "NFTCDN_CHAIN_RPC", "NFTCDN_IPFS_GATEWAY", "NFTCDN_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def key():
    return ResourceKey(chain_id=199, collection=COLLECTION, token_id=1)


@pytest.fixture
def store():
    return InMemoryArtifactStore()


@pytest.fixture
def chain_reader():
    return MockChainReader(token_uris={1: METADATA_URI}, names={COLLECTION: "Mock Apes"})


@pytest.fixture
def content_resolver():
    return MockContentResolver({
        METADATA_URI: json.dumps(METADATA).encode("utf-8"),
        IMAGE_URI: IMAGE_BYTES,
    })


@pytest.fixture
def engine(store, chain_reader, content_resolver):
    return ResolutionEngine(store=store, chain_reader=chain_reader, content_resolver=content_resolver)


@pytest.fixture
def names_store():
    return InMemoryArtifactStore()


@pytest.fixture
def name_cache(names_store, chain_reader):
    return NameCache(store=names_store, chain_reader=chain_reader)
