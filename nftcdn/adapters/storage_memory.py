"""
In-memory ArtifactStore, for tests and throwaway runs.
"""
from typing import Dict, List

from nftcdn.kernel.contracts import ArtifactStore
from nftcdn.kernel.errors import NotFound


class InMemoryArtifactStore(ArtifactStore):
    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self.writes: List[str] = []

    def exists(self, path: str) -> bool:
        return path in self._blobs

    def read(self, path: str) -> bytes:
        try:
            return self._blobs[path]
        except KeyError as exc:
            raise NotFound(f"No artifact at {path}") from exc

    def write(self, path: str, data: bytes) -> None:
        self.writes.append(path)
        self._blobs[path] = bytes(data)

    def paths(self) -> List[str]:
        return sorted(self._blobs)
