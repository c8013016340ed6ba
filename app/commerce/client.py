"""FastSpring commerce API client."""
import logging
from typing import Any

import httpx
from fastapi import Request

from app.core.config import Settings
from app.core.exceptions import BadGateway, GatewayTimeout

logger = logging.getLogger(__name__)


class OrderGateway:
    """Fetches orders from the commerce API using HTTP basic auth.

    One ``httpx.AsyncClient`` is kept for the life of the application so
    connections are pooled between requests. Call ``aclose`` on shutdown.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        user_agent: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=httpx.BasicAuth(username, password),
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "OrderGateway":
        return cls(
            base_url=config.fs_api_url,
            username=config.fs_api_username,
            password=config.fs_api_password,
            user_agent=config.fs_user_agent,
            timeout=config.fs_api_timeout_seconds,
        )

    async def fetch_orders(self) -> Any:
        """Return the order list exactly as the commerce API sent it.

        Raises:
            GatewayTimeout: The API did not answer within the timeout.
            BadGateway: The request failed, the API answered with an error
                status, or the body was not JSON.
        """
        try:
            response = await self._client.get("/orders")
        except httpx.TimeoutException as e:
            logger.error(f"Order API timed out: {e!r}")
            raise GatewayTimeout() from e
        except httpx.HTTPError as e:
            logger.error(f"Order API request failed: {e!r}")
            raise BadGateway() from e

        logger.info(f"Order API responded with status {response.status_code}")
        if response.is_error:
            raise BadGateway(f"Order service returned status {response.status_code}.")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Order API returned a non-JSON body: {e}")
            raise BadGateway("Order service returned an unreadable response.") from e

    async def aclose(self) -> None:
        await self._client.aclose()


def get_order_gateway(request: Request) -> OrderGateway:
    """Dependency returning the gateway created at startup.

    The gateway owns a connection pool that the lifespan handler closes on
    shutdown, so it is never created here.
    """
    gateway = getattr(request.app.state, "order_gateway", None)
    if gateway is None:
        raise RuntimeError("Order gateway is not initialised; the app lifespan has not run")
    return gateway
