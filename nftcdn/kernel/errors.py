"""
Closed taxonomy of failures the gateway kernel can report.

Every exception carries an ErrorKind so callers that only want a typed
outcome (see ResolutionResult) can branch on the kind without matching
exception classes.
"""
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_KEY = "invalid_key"
    UNSUPPORTED_CHAIN = "unsupported_chain"
    CHAIN_READ_ERROR = "chain_read_error"
    CONTENT_FETCH_ERROR = "content_fetch_error"
    METADATA_FIELD_MISSING = "metadata_field_missing"
    NOT_FOUND = "not_found"


class GatewayError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidKey(GatewayError):
    """Malformed chain id, collection address or token id."""
    kind = ErrorKind.INVALID_KEY


class UnsupportedChain(GatewayError):
    kind = ErrorKind.UNSUPPORTED_CHAIN

    def __init__(self, chain_id: int):
        super().__init__(f"Chain ID {chain_id} is not supported")
        self.chain_id = chain_id


class ChainReadError(GatewayError):
    """RPC failure, contract revert, malformed response or timeout."""
    kind = ErrorKind.CHAIN_READ_ERROR


class ContentFetchError(GatewayError):
    """Gateway failure: non-2xx, transport error, timeout or empty body."""
    kind = ErrorKind.CONTENT_FETCH_ERROR


class MetadataFieldMissing(GatewayError):
    kind = ErrorKind.METADATA_FIELD_MISSING

    def __init__(self, field: str):
        super().__init__(f"{field} not available in the metadata")
        self.field = field


class NotFound(GatewayError):
    """Store miss. Handled inside the kernel, never surfaced to clients."""
    kind = ErrorKind.NOT_FOUND
