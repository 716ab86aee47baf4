"""
Shared httpx client for provider calls.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the pooled httpx client used by every provider adapter."""

    _provider_client: httpx.AsyncClient | None = None

    @classmethod
    def get_provider_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared client for provider requests.

        Connections are pooled across providers and requests. The timeout is
        the only bound on a hung request; there are no retries.

        Returns:
            Configured httpx.AsyncClient
        """
        if cls._provider_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_PROVIDER_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._provider_client = httpx.AsyncClient(
                timeout=Config.PROVIDER_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._provider_client

    @classmethod
    async def close_all(cls) -> None:
        """Close the shared client and release its connections."""
        if cls._provider_client is not None:
            await cls._provider_client.aclose()
            cls._provider_client = None
