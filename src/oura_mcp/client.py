"""Oura client, handles low-level API calls."""

import logging
from typing import Any

import httpx

from .auth import CredentialProvider, select_credential
from .config import Config, get_config
from .consts import USERCOLLECTION_PATH, USER_AGENT
from .exceptions import UpstreamError
from .models import DateRange
from .protocols import HeaderProvider

logger = logging.getLogger("oura-mcp.client")


class OuraClient:
    """Oura API client with authentication.

    Responsibilities:
    - Fetch usercollection endpoints with the provider's headers
    - Turn HTTP and network failures into short UpstreamErrors
    """

    def __init__(
        self,
        config: Config | None = None,
        credential_provider: HeaderProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize OuraClient.

        Args:
            config: Config instance. If None, uses get_config().
            credential_provider: Authorization header provider. If None, one is
                built from config.
            http_client: HTTP client. If None, creates a new one.

        Raises:
            ConfigurationError: If no credential can be selected from config.
        """
        self.config = config or get_config()

        # Select first so a bad configuration fails before any client exists
        credential = None if credential_provider else select_credential(self.config)

        self.http_client = http_client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

        self.credential_provider = credential_provider or CredentialProvider(
            credential, self.config, self.http_client
        )

        logger.info(f"Oura client created for {self.credential_provider.get_base_url()}")

    async def __aenter__(self) -> "OuraClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    def endpoint_url(self, category: str) -> str:
        base_url = self.credential_provider.get_base_url().rstrip("/")
        return f"{base_url}{USERCOLLECTION_PATH}/{category}"

    async def fetch(self, category: str, date_range: DateRange | None = None) -> Any:
        """GET a usercollection endpoint and return its parsed JSON unmodified.

        Args:
            category: Upstream category name, e.g. "daily_sleep".
            date_range: Optional start/end dates sent as query parameters.

        Returns:
            Parsed JSON payload.

        Raises:
            AuthenticationError: From the provider if a token cannot be obtained.
            UpstreamError: For non-2xx responses, network errors, timeouts and
                unparseable bodies.
        """
        headers = await self.credential_provider.get_authorization_headers()
        url = self.endpoint_url(category)
        params = date_range.as_query_params() if date_range else None

        logger.debug(f"GET {url} params={params}")
        try:
            response = await self.http_client.get(url, headers=headers, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            # The body is deliberately left out of the error
            status = e.response.status_code
            reason = e.response.reason_phrase
            logger.warning(f"GET {url} failed with status {status}")
            raise UpstreamError(
                f"Failed to fetch {category}: {status} {reason}",
                status_code=status,
                reason=reason,
                context={"category": category},
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"GET {url} timed out")
            raise UpstreamError(
                f"Failed to fetch {category}: request timed out",
                reason="timeout",
                context={"category": category},
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"GET {url} network error: {type(e).__name__}")
            raise UpstreamError(
                f"Failed to fetch {category}: network error ({type(e).__name__})",
                reason=type(e).__name__,
                suggestions=["Check your internet connection"],
                context={"category": category},
            ) from e
        except ValueError as e:
            logger.warning(f"GET {url} returned a body that is not JSON")
            raise UpstreamError(
                f"Failed to fetch {category}: invalid JSON in response",
                reason="invalid JSON",
                context={"category": category},
            ) from e

        logger.debug(f"GET {url} successful")
        return data
