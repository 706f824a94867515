"""Credential selection and authorization headers with serialized token refresh."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import assert_never

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .config import Config
from .consts import (
    AUTHORIZE_URL,
    DEFAULT_REDIRECT_URI,
    DEFAULT_SCOPES,
    DEFAULT_TOKEN_EXPIRY_SECONDS,
    TOKEN_REFRESH_BUFFER_SECONDS,
)
from .exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger("oura-mcp.auth")


class AuthMode(StrEnum):
    STATIC = "static"
    OAUTH = "oauth"


class StaticToken(BaseModel):
    """Personal access token, used verbatim for the life of the process."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., repr=False)


class OAuthCredential(BaseModel):
    """OAuth2 client credentials plus the cached token state they produce."""

    client_id: str
    client_secret: str = Field(..., repr=False)
    redirect_uri: str = DEFAULT_REDIRECT_URI
    access_token: str | None = Field(None, repr=False)
    refresh_token: str | None = Field(None, repr=False)
    expiry: datetime | None = None
    refresh_margin_seconds: int = TOKEN_REFRESH_BUFFER_SECONDS


Credential = StaticToken | OAuthCredential


def _secret(value) -> str:
    """Unwrap an optional SecretStr, treating blank values as absent."""
    if value is None:
        return ""
    return value.get_secret_value().strip()


def select_credential(config: Config) -> Credential:
    """Pick the credential variant from configuration.

    A personal access token wins outright; otherwise both client id and
    secret are required.

    Raises:
        ConfigurationError: If neither credential form is complete.
    """
    token = _secret(config.personal_access_token)
    if token:
        logger.debug("Using personal access token")
        return StaticToken(value=token)

    client_id = (config.client_id or "").strip()
    client_secret = _secret(config.client_secret)
    if client_id and client_secret:
        logger.debug("Using OAuth2 client credentials")
        return OAuthCredential(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=config.redirect_uri,
            refresh_token=_secret(config.refresh_token) or None,
        )

    raise ConfigurationError(
        "Either OURA_PERSONAL_ACCESS_TOKEN or both OURA_CLIENT_ID and "
        "OURA_CLIENT_SECRET must be provided",
        suggestions=[
            "Create a personal access token at https://cloud.ouraring.com",
            "Or register an OAuth application and set its client id and secret",
        ],
    )


class CredentialProvider:
    """Supplies the Authorization header for upstream requests.

    Responsibilities:
    - Hold the one credential chosen at startup
    - For OAuth, obtain and cache an access token, refreshing it before expiry
    - Keep at most one token exchange in flight; concurrent callers share it
    """

    def __init__(
        self,
        credential: Credential,
        config: Config,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize CredentialProvider.

        Args:
            credential: The selected credential variant.
            config: Config instance with base and token URLs.
            http_client: HTTP client for token requests. Only needed in OAuth mode.
        """
        self.credential = credential
        self.config = config
        self.http_client = http_client
        self._refresh_task: asyncio.Task | None = None
        self._exchange_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls, config: Config, http_client: httpx.AsyncClient | None = None
    ) -> "CredentialProvider":
        """Build a provider from configuration.

        Raises:
            ConfigurationError: If no credential can be selected.
        """
        return cls(select_credential(config), config, http_client)

    @property
    def mode(self) -> AuthMode:
        match self.credential:
            case StaticToken():
                return AuthMode.STATIC
            case OAuthCredential():
                return AuthMode.OAUTH
            case _:
                assert_never(self.credential)

    def get_base_url(self) -> str:
        return self.config.base_url

    async def get_authorization_headers(self) -> dict[str, str]:
        """Get headers authorizing an upstream request.

        Returns:
            Mapping with a single bearer Authorization header.

        Raises:
            AuthenticationError: If an OAuth token exchange fails.
        """
        match self.credential:
            case StaticToken(value=token):
                return {"Authorization": f"Bearer {token}"}
            case OAuthCredential():
                token = await self._get_valid_access_token(self.credential)
                return {"Authorization": f"Bearer {token}"}
            case _:
                assert_never(self.credential)

    def authorization_url(
        self, state: str | None = None, scopes: tuple[str, ...] = DEFAULT_SCOPES
    ) -> str:
        """URL the user visits to grant access (authorization-code flow).

        Raises:
            ConfigurationError: In static token mode.
        """
        credential = self._require_oauth("authorization_url")
        params = {
            "response_type": "code",
            "client_id": credential.client_id,
            "redirect_uri": credential.redirect_uri,
            "scope": " ".join(scopes),
        }
        if state:
            params["state"] = state
        return str(httpx.URL(AUTHORIZE_URL, params=params))

    async def exchange_authorization_code(self, code: str) -> None:
        """Trade an authorization code for access and refresh tokens.

        Raises:
            ConfigurationError: In static token mode.
            AuthenticationError: If the exchange fails.
        """
        credential = self._require_oauth("exchange_authorization_code")
        await self._request_token(
            credential,
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": credential.redirect_uri,
            },
        )

    def _require_oauth(self, operation: str) -> OAuthCredential:
        if not isinstance(self.credential, OAuthCredential):
            raise ConfigurationError(
                f"{operation} requires OAuth2 client credentials",
                context={"mode": str(self.mode)},
            )
        return self.credential

    async def _get_valid_access_token(self, credential: OAuthCredential) -> str:
        if self._needs_refresh(credential):
            if self._refresh_task is None:
                logger.debug("Starting token exchange")
                self._refresh_task = asyncio.create_task(self._refresh(credential))
                self._refresh_task.add_done_callback(self._collect_refresh_result)
            else:
                logger.debug("Joining in-flight token exchange")
            # A cancelled caller must not cancel the exchange others await
            await asyncio.shield(self._refresh_task)

        if not credential.access_token:
            raise AuthenticationError("No valid access token available")

        return credential.access_token

    @staticmethod
    def _needs_refresh(credential: OAuthCredential) -> bool:
        """Check if token is missing or expires within the safety margin."""
        if credential.access_token is None or credential.expiry is None:
            return True

        refresh_time = credential.expiry - timedelta(
            seconds=credential.refresh_margin_seconds
        )
        return datetime.now(UTC) >= refresh_time

    @staticmethod
    def _collect_refresh_result(task: asyncio.Task) -> None:
        # waiters may all have been cancelled; the failure is still consumed here
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Token exchange failed: {task.exception()}")

    async def _refresh(self, credential: OAuthCredential) -> None:
        try:
            if credential.refresh_token:
                form = {
                    "grant_type": "refresh_token",
                    "refresh_token": credential.refresh_token,
                }
            else:
                form = {"grant_type": "client_credentials"}
            await self._request_token(credential, form)
        finally:
            self._refresh_task = None

    async def _request_token(
        self, credential: OAuthCredential, form: dict[str, str]
    ) -> None:
        """POST to the token endpoint and store the result on the credential."""
        if self.http_client is None:
            raise ConfigurationError("OAuth2 mode requires an HTTP client")

        grant_type = form["grant_type"]
        data = {
            **form,
            "client_id": credential.client_id,
            "client_secret": credential.client_secret,
        }

        async with self._exchange_lock:
            logger.debug(f"Requesting token (grant_type={grant_type})")
            try:
                response = await self.http_client.post(
                    self.config.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                token_data = response.json()
                access_token = token_data["access_token"]
                expires_in = int(
                    token_data.get("expires_in", DEFAULT_TOKEN_EXPIRY_SECONDS)
                )
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                logger.error(f"Token exchange rejected with status {status}")
                raise AuthenticationError(
                    f"Token exchange failed: {status} {e.response.reason_phrase}",
                    suggestions=[
                        "Verify OURA_CLIENT_ID and OURA_CLIENT_SECRET",
                        "A stored refresh token may have been revoked",
                    ],
                    context={"status_code": status, "grant_type": grant_type},
                ) from e
            except httpx.TimeoutException as e:
                logger.error("Token exchange timed out")
                raise AuthenticationError(
                    "Token exchange failed: request timed out",
                    context={"grant_type": grant_type},
                ) from e
            except httpx.RequestError as e:
                logger.error(f"Token exchange network error: {type(e).__name__}")
                raise AuthenticationError(
                    f"Token exchange failed: network error ({type(e).__name__})",
                    context={"grant_type": grant_type},
                ) from e
            except (KeyError, TypeError, ValueError) as e:
                logger.error("Token response missing access_token")
                raise AuthenticationError(
                    "Token exchange failed: response missing access_token",
                    context={"grant_type": grant_type},
                ) from e

            credential.access_token = access_token
            credential.expiry = datetime.now(UTC) + timedelta(seconds=expires_in)
            # short-lived tokens would otherwise count as expiring on arrival
            credential.refresh_margin_seconds = min(
                TOKEN_REFRESH_BUFFER_SECONDS, expires_in // 2
            )
            if token_data.get("refresh_token"):
                credential.refresh_token = token_data["refresh_token"]

            logger.info("Access token obtained")
