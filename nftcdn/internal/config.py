"""
Runtime settings for the gateway, assembled from constants and NFTCDN_*
environment variables.
"""
import json
import os
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field, field_validator

from nftcdn.internal import paths
from nftcdn.internal.constants import (
    CHAIN_TIMEOUT_SECONDS,
    CONTENT_ADDRESSED_SCHEME,
    CONTENT_TIMEOUT_SECONDS,
    DEFAULT_CHAIN_RPC,
    DEFAULT_CONTENT_GATEWAY,
    GATEWAY_HOST,
    GATEWAY_PORT,
)


class GatewaySettings(BaseModel):
    data_dir: Path
    host: str = GATEWAY_HOST
    port: int = GATEWAY_PORT
    chain_rpc: Dict[int, str] = Field(default_factory=lambda: dict(DEFAULT_CHAIN_RPC))
    content_scheme: str = CONTENT_ADDRESSED_SCHEME
    content_gateway: str = DEFAULT_CONTENT_GATEWAY
    chain_timeout: float = Field(default=CHAIN_TIMEOUT_SECONDS, gt=0)
    content_timeout: float = Field(default=CONTENT_TIMEOUT_SECONDS, gt=0)
    log_level: str = "INFO"

    @field_validator("content_gateway")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def storage_dir(self) -> Path:
        return paths.get_storage_dir(self.data_dir)

    @property
    def names_dir(self) -> Path:
        return paths.get_names_dir(self.data_dir)

    @property
    def log_file(self) -> Path:
        return paths.get_log_file(self.data_dir)

    @classmethod
    def from_env(cls, **overrides) -> "GatewaySettings":
        """
        Build settings from the environment. Keyword overrides (e.g. CLI
        options) win over environment variables, which win over defaults.
        """
        env = os.environ
        values: dict = {"data_dir": paths.get_app_data_dir()}

        if "NFTCDN_HOST" in env:
            values["host"] = env["NFTCDN_HOST"]
        if "NFTCDN_PORT" in env:
            values["port"] = int(env["NFTCDN_PORT"])
        if "NFTCDN_IPFS_GATEWAY" in env:
            values["content_gateway"] = env["NFTCDN_IPFS_GATEWAY"]
        if "NFTCDN_CHAIN_TIMEOUT" in env:
            values["chain_timeout"] = float(env["NFTCDN_CHAIN_TIMEOUT"])
        if "NFTCDN_CONTENT_TIMEOUT" in env:
            values["content_timeout"] = float(env["NFTCDN_CONTENT_TIMEOUT"])
        if "NFTCDN_LOG_LEVEL" in env:
            values["log_level"] = env["NFTCDN_LOG_LEVEL"]

        chain_rpc = dict(DEFAULT_CHAIN_RPC)
        if "NFTCDN_CHAIN_RPC" in env:
            # JSON object of {"<chain id>": "<rpc url>"}, merged over the defaults
            extra = json.loads(env["NFTCDN_CHAIN_RPC"])
            chain_rpc.update({int(chain_id): url for chain_id, url in extra.items()})
        values["chain_rpc"] = chain_rpc

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
