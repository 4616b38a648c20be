import itertools

import pytest

from nftcdn.kernel.artifacts import ArtifactKind, derive_name_table_path, derive_path
from nftcdn.kernel.errors import InvalidKey
from tests.kernel.mocks import COLLECTION

OTHER_COLLECTION = "0xe7f1725e7734ce288f8367e1bb143e90bb3f0512"


def test_metadata_path_layout():
    assert derive_path(ArtifactKind.METADATA, 199, COLLECTION, 5) == f"199/{COLLECTION}/5_metadata"


def test_image_path_carries_extension():
    assert derive_path(ArtifactKind.IMAGE, 199, COLLECTION, 5) == f"199/{COLLECTION}/5_image.png"


def test_derive_is_deterministic():
    first = derive_path(ArtifactKind.IMAGE, 1, COLLECTION, 99)
    second = derive_path(ArtifactKind.IMAGE, 1, COLLECTION, 99)
    assert first == second


def test_any_differing_field_gives_a_different_path():
    tuples = list(itertools.product(
        [ArtifactKind.METADATA, ArtifactKind.IMAGE],
        [1, 199],
        [COLLECTION, OTHER_COLLECTION],
        [1, 11],
    ))
    paths = {derive_path(*fields) for fields in tuples}
    assert len(paths) == len(tuples)


def test_token_ids_sharing_a_prefix_do_not_collide():
    assert derive_path(ArtifactKind.METADATA, 1, COLLECTION, 1) != derive_path(ArtifactKind.METADATA, 11, COLLECTION, 1)
    assert derive_path(ArtifactKind.METADATA, 1, COLLECTION, 11) != derive_path(ArtifactKind.METADATA, 1, COLLECTION, 1)


@pytest.mark.parametrize(
    "chain_id, collection, token_id",
    [
        (199, "", 1),
        (199, COLLECTION, -1),
        (-5, COLLECTION, 1),
        (199, "../etc", 1),
        (199, "..", 1),
    ]
)
def test_malformed_inputs_raise_invalid_key(chain_id, collection, token_id):
    with pytest.raises(InvalidKey):
        derive_path(ArtifactKind.METADATA, chain_id, collection, token_id)


def test_name_table_path():
    assert derive_name_table_path(199) == "199/name.json"
