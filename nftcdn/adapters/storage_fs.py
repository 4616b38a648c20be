"""
A concrete implementation of the ArtifactStore that keeps artifacts as plain
files under a root directory.
"""
import uuid
from pathlib import Path

from nftcdn.kernel.contracts import ArtifactStore
from nftcdn.kernel.errors import InvalidKey, NotFound


class FileSystemArtifactStore(ArtifactStore):
    """
    Stores each artifact at ``<root>/<derived path>``.
    This is an 'adapter' in the hexagonal architecture.
    """
    def __init__(self, root: Path):
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _locate(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if not target.is_relative_to(self._root.resolve()):
            raise InvalidKey(f"Path escapes the store root: {path}")
        return target

    def exists(self, path: str) -> bool:
        return self._locate(path).is_file()

    def read(self, path: str) -> bytes:
        target = self._locate(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(f"No artifact at {path}") from exc

    def write(self, path: str, data: bytes) -> None:
        target = self._locate(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        # Unique temp name per writer; the rename makes the blob visible whole.
        temp_path = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            temp_path.write_bytes(data)
            temp_path.replace(target)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    def __repr__(self) -> str:
        return f"<FileSystemArtifactStore root={self._root}>"
