import os
from pathlib import Path

from nftcdn.internal.constants import NAMES_DIR_NAME, STORAGE_DIR_NAME


# ---------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------

def get_app_data_dir() -> Path:
    """
    Returns the application data directory.

    - NFTCDN_HOME if set
    - Windows: %APPDATA%\\nftcdn
    - Linux/macOS: ~/.nftcdn
    """
    override = os.environ.get("NFTCDN_HOME")
    if override:
        path = Path(override)
    elif os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", str(Path.home()))
        path = Path(base) / "nftcdn"
    else:  # Linux / macOS
        path = Path.home() / ".nftcdn"

    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Cache roots
# ---------------------------------------------------------------------

def get_storage_dir(data_dir: Path | None = None) -> Path:
    """
    Root of the per-token artifact tree (metadata and images).
    """
    base = data_dir if data_dir is not None else get_app_data_dir()
    path = base / STORAGE_DIR_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_names_dir(data_dir: Path | None = None) -> Path:
    """
    Root of the per-chain collection name tables.
    """
    base = data_dir if data_dir is not None else get_app_data_dir()
    path = base / NAMES_DIR_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------

def get_log_file(data_dir: Path | None = None) -> Path:
    base = data_dir if data_dir is not None else get_app_data_dir()
    log_dir = base / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "nftcdn.log.json"


if __name__ == "__main__":
    print("App Data Dir:", get_app_data_dir())
    print("Storage Dir:", get_storage_dir())
    print("Names Dir:", get_names_dir())
    print("Log File:", get_log_file())
