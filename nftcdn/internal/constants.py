GATEWAY_HOST = "127.0.0.1"
GATEWAY_PORT = 9001

# Chain id -> JSON-RPC endpoint
DEFAULT_CHAIN_RPC = {
    199: "https://bittorrent.drpc.org",  # BitTorrent Chain
}

CONTENT_ADDRESSED_SCHEME = "ipfs"
DEFAULT_CONTENT_GATEWAY = "https://ipfs.io"

CHAIN_TIMEOUT_SECONDS = 15.0
CONTENT_TIMEOUT_SECONDS = 30.0

STORAGE_DIR_NAME = "storage"
NAMES_DIR_NAME = "name"
NAME_TABLE_FILE_NAME = "name.json"
IMAGE_EXTENSION = ".png"
