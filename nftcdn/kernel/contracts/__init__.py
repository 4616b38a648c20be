from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey
from nftcdn.kernel.contracts.contracts import (
    ArtifactStore,
    ChainReader,
    ContentResolver,
    ResolutionResult,
)

__all__ = [
    "ArtifactKind",
    "ArtifactStore",
    "ChainReader",
    "ContentResolver",
    "ResolutionResult",
    "ResourceKey",
]
