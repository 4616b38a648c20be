"""
Core, reusable logic for CLI commands, decoupled from Typer.
"""
import asyncio

from nftcdn.cli.client import GatewayClient
from nftcdn.internal.config import GatewaySettings
from nftcdn.internal.logging import get_logger, setup_logging

logger = get_logger(__name__)


def run_async(coro):
    """
    Run an async coroutine from sync command code.
    """
    return asyncio.run(coro)


def load_settings(**overrides) -> GatewaySettings:
    settings = GatewaySettings.from_env(**overrides)
    setup_logging(settings.log_level, log_file_path=settings.log_file)
    return settings


def client_for(settings: GatewaySettings) -> GatewayClient:
    return GatewayClient(host=settings.host, port=settings.port)


def is_gateway_active(client: GatewayClient) -> bool:
    """
    Check whether a gateway answers on /health.
    """
    try:
        health = run_async(client.health())
        return isinstance(health, dict) and health.get("status") == "OK"
    except Exception as e:
        logger.debug("Gateway health check failed", base_url=client.base_url, error=str(e))
        return False
