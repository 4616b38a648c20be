"""
Identity of cached artifacts and the pure mapping from that identity to a
storage path.

Nothing in this module performs I/O. The stores in nftcdn.adapters are
keyed by the relative POSIX paths produced here.
"""
from dataclasses import dataclass
from enum import Enum

from web3 import Web3

from nftcdn.internal.constants import IMAGE_EXTENSION, NAME_TABLE_FILE_NAME
from nftcdn.kernel.errors import InvalidKey


class ArtifactKind(str, Enum):
    METADATA = "metadata"
    IMAGE = "image"

    @property
    def content_type(self) -> str:
        return "application/json" if self is ArtifactKind.METADATA else "image/png"

    @property
    def extension(self) -> str:
        return IMAGE_EXTENSION if self is ArtifactKind.IMAGE else ""


def normalize_collection(collection: str) -> str:
    """
    Validate a contract address and return its canonical ``0x``-prefixed
    lower-case form.

    All-lower and all-upper spellings are accepted as is; a mixed-case
    spelling must carry a valid EIP-55 checksum.
    """
    if not isinstance(collection, str) or not Web3.is_address(collection):
        raise InvalidKey(f"Invalid collection: {collection!r}")
    checksummed = Web3.to_checksum_address(collection)
    digits = collection[2:] if collection[:2].lower() == "0x" else collection
    if digits not in (digits.lower(), digits.upper()) and digits != checksummed[2:]:
        raise InvalidKey(f"Invalid collection checksum: {collection!r}")
    return checksummed.lower()


def _require_non_negative_int(value, field: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidKey(f"{field} must be a non-negative integer, got {value!r}")
    return value


@dataclass(frozen=True)
class ResourceKey:
    """
    The (chain, collection, token) triple identifying an artifact family.
    """
    chain_id: int
    collection: str
    token_id: int

    def __post_init__(self):
        _require_non_negative_int(self.chain_id, "chain_id")
        _require_non_negative_int(self.token_id, "token_id")
        object.__setattr__(self, "collection", normalize_collection(self.collection))

    @classmethod
    def parse(cls, chain_id: str, collection: str, token_id: str) -> "ResourceKey":
        """Build a key from raw request segments."""
        try:
            return cls(chain_id=int(chain_id), collection=collection, token_id=int(token_id))
        except (TypeError, ValueError) as exc:
            raise InvalidKey(f"Invalid resource identifier: {chain_id}/{collection}/{token_id}") from exc

    def __str__(self) -> str:
        return f"{self.chain_id}/{self.collection}#{self.token_id}"


def _require_segment(collection: str) -> str:
    if not isinstance(collection, str) or not collection:
        raise InvalidKey("collection cannot be empty")
    if "/" in collection or "\\" in collection or collection in (".", ".."):
        raise InvalidKey(f"collection is not a valid path segment: {collection!r}")
    return collection


def derive_path(kind: ArtifactKind, chain_id: int, collection: str, token_id: int) -> str:
    """
    Storage path for one artifact: ``{chain}/{collection}/{token}_{kind}``,
    with the image extension appended for images.
    """
    kind = ArtifactKind(kind)
    _require_non_negative_int(chain_id, "chain_id")
    _require_non_negative_int(token_id, "token_id")
    _require_segment(collection)
    return f"{chain_id}/{collection}/{token_id}_{kind.value}{kind.extension}"


def derive_key_path(kind: ArtifactKind, key: ResourceKey) -> str:
    return derive_path(kind, key.chain_id, key.collection, key.token_id)


def derive_name_table_path(chain_id: int) -> str:
    _require_non_negative_int(chain_id, "chain_id")
    return f"{chain_id}/{NAME_TABLE_FILE_NAME}"
