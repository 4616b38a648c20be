"""
Read-through cache of collection display names, one JSON table per chain.
"""
import json
from typing import Dict

from nftcdn.internal.logging import get_logger
from nftcdn.kernel.artifacts import derive_name_table_path, normalize_collection
from nftcdn.kernel.contracts import ArtifactStore, ChainReader
from nftcdn.kernel.errors import NotFound

logger = get_logger(__name__)


class NameCache:
    """
    Collection names keyed by (chain, collection).

    The table is read-modify-written whole. Store operations are synchronous,
    so updates from one process never interleave; two processes sharing a
    data directory can still drop each other's entry, which is re-fetched
    from the chain on the next miss.
    """
    def __init__(self, store: ArtifactStore, chain_reader: ChainReader):
        self.store = store
        self.chain_reader = chain_reader

    async def get_name(self, chain_id: int, collection: str) -> str:
        collection = normalize_collection(collection)
        table_path = derive_name_table_path(chain_id)

        cached = self._load_table(table_path).get(collection)
        if cached is not None:
            logger.debug("Collection name retrieved from cache", chain_id=chain_id, collection=collection, name=cached)
            return cached

        collection_name = await self.chain_reader.name(chain_id, collection)

        # Re-read after the chain call so entries written meanwhile survive.
        table = self._load_table(table_path)
        table[collection] = collection_name
        self.store.write(table_path, json.dumps(table, indent=2).encode("utf-8"))
        logger.info("Collection name cached", chain_id=chain_id, collection=collection, name=collection_name)
        return collection_name

    def _load_table(self, table_path: str) -> Dict[str, str]:
        try:
            raw = self.store.read(table_path)
        except NotFound:
            return {}
        try:
            table = json.loads(raw)
        except ValueError:
            logger.warning("Corrupted name table detected, starting empty", path=table_path)
            return {}
        if not isinstance(table, dict):
            logger.warning("Name table is not a mapping, starting empty", path=table_path)
            return {}
        return table
