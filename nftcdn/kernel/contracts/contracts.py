from dataclasses import dataclass
from typing import Optional, Protocol

from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey
from nftcdn.kernel.errors import ErrorKind, GatewayError


class ArtifactStore(Protocol):
    """
    Durable byte storage keyed by derived paths.
    The kernel never touches the filesystem except through this interface.
    """

    def exists(self, path: str) -> bool:
        ...

    def read(self, path: str) -> bytes:
        """
        Return the stored bytes. Raises NotFound when exists() would be False.
        """
        ...

    def write(self, path: str, data: bytes) -> None:
        """
        Create-or-overwrite the blob at path, creating parent containers.
        Last writer wins; readers never observe a partially written blob.
        """
        ...


class ChainReader(Protocol):
    """
    Read-only view of ERC-721 contracts. Implementations must not cache and
    must not retry; failures surface as UnsupportedChain or ChainReadError.
    """

    async def owner_of(self, chain_id: int, collection: str, token_id: int) -> str:
        ...

    async def token_uri(self, chain_id: int, collection: str, token_id: int) -> str:
        ...

    async def name(self, chain_id: int, collection: str) -> str:
        ...


class ContentResolver(Protocol):
    """
    Dereferences a content location (gateway-rewritten if content addressed)
    to its raw bytes. Failures surface as ContentFetchError.
    """

    async def resolve(self, location_uri: str) -> bytes:
        ...


@dataclass(frozen=True)
class ResolutionResult:
    """
    Typed outcome of a resolution: either data, or the kind of failure.
    This is a pure data contract with no logic beyond construction helpers.
    """
    key: ResourceKey
    kind: ArtifactKind
    data: Optional[bytes] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def content_type(self) -> str:
        return self.kind.content_type

    @classmethod
    def success(cls, key: ResourceKey, kind: ArtifactKind, data: bytes) -> "ResolutionResult":
        return cls(key=key, kind=kind, data=data)

    @classmethod
    def failure(cls, key: ResourceKey, kind: ArtifactKind, exc: GatewayError) -> "ResolutionResult":
        return cls(key=key, kind=kind, error=exc.kind, message=str(exc))
