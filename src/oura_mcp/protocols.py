"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class HeaderProvider(Protocol):
    """Protocol for upstream authorization providers."""

    def get_base_url(self) -> str:
        """Base URL of the upstream API."""
        ...

    async def get_authorization_headers(self) -> dict[str, str]:
        """Get headers authorizing an upstream request.

        Returns:
            Mapping containing the Authorization header.

        Raises:
            AuthenticationError: If a token cannot be obtained.
        """
        ...
