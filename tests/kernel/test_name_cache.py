import json

import pytest

from nftcdn.kernel.errors import ChainReadError, InvalidKey, UnsupportedChain
from tests.kernel.mocks import COLLECTION

OTHER_COLLECTION = "0xe7f1725e7734ce288f8367e1bb143e90bb3f0512"
CHECKSUMMED = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


async def test_first_lookup_reads_chain_once_and_persists(name_cache, names_store, chain_reader):
    assert await name_cache.get_name(199, COLLECTION) == "Mock Apes"

    assert chain_reader.name_calls == [(199, COLLECTION)]
    assert json.loads(names_store.read("199/name.json")) == {COLLECTION: "Mock Apes"}


async def test_second_lookup_is_served_from_table(name_cache, chain_reader):
    await name_cache.get_name(199, COLLECTION)
    chain_reader.name_calls.clear()

    assert await name_cache.get_name(199, COLLECTION) == "Mock Apes"
    assert chain_reader.name_calls == []


async def test_checksummed_address_hits_the_same_entry(name_cache, chain_reader):
    await name_cache.get_name(199, COLLECTION)
    await name_cache.get_name(199, CHECKSUMMED)
    assert len(chain_reader.name_calls) == 1


async def test_new_entry_is_merged_into_existing_table(name_cache, names_store, chain_reader):
    chain_reader.names[OTHER_COLLECTION] = "Other"
    await name_cache.get_name(199, COLLECTION)
    await name_cache.get_name(199, OTHER_COLLECTION)

    table = json.loads(names_store.read("199/name.json"))
    assert table == {COLLECTION: "Mock Apes", OTHER_COLLECTION: "Other"}


async def test_tables_are_per_chain(name_cache, names_store, chain_reader):
    chain_reader.supported_chains.add(1)
    await name_cache.get_name(199, COLLECTION)
    await name_cache.get_name(1, COLLECTION)

    assert names_store.paths() == ["1/name.json", "199/name.json"]
    assert len(chain_reader.name_calls) == 2


async def test_corrupted_table_is_rebuilt(name_cache, names_store):
    names_store.write("199/name.json", b"not json")
    assert await name_cache.get_name(199, COLLECTION) == "Mock Apes"
    assert json.loads(names_store.read("199/name.json")) == {COLLECTION: "Mock Apes"}


async def test_invalid_collection_never_touches_chain(name_cache, chain_reader, names_store):
    with pytest.raises(InvalidKey):
        await name_cache.get_name(199, "nope")
    assert chain_reader.name_calls == []
    assert names_store.writes == []


async def test_chain_failures_propagate_and_write_nothing(name_cache, chain_reader, names_store):
    with pytest.raises(UnsupportedChain):
        await name_cache.get_name(5, COLLECTION)

    chain_reader.force_error = True
    with pytest.raises(ChainReadError):
        await name_cache.get_name(199, COLLECTION)
    assert names_store.writes == []
