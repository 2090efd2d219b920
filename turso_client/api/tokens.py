"""
Tokens API - Platform API tokens and session tokens.
"""

from typing import List

from ._http import HTTPClient, path_segment
from ._classify import Operation
from ..models import ApiToken, CreatedApiToken


class ApiTokensAPI:
    """
    API for platform API tokens.

    Handles:
    - Listing tokens
    - Minting and revoking named tokens
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize API Tokens API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self) -> List[ApiToken]:
        """List API tokens of the current user."""
        return self._http.call(
            "GET",
            "/v1/auth/api-tokens",
            Operation("get api tokens list", "api token"),
            shape=List[ApiToken],
            envelope="tokens",
        )

    def create(self, name: str) -> CreatedApiToken:
        """
        Mint a new API token.

        The token value is only returned here; it cannot be read back later.
        """
        return self._http.call(
            "POST",
            f"/v2/auth/api-tokens/{path_segment(name)}",
            Operation("create token", "api token", name, creates=True),
            shape=CreatedApiToken,
            envelope="token",
        )

    def revoke(self, name: str) -> None:
        """Revoke an API token."""
        self._http.call(
            "DELETE",
            f"/v1/auth/api-tokens/{path_segment(name)}",
            Operation("revoke API token", "api token", name),
        )


class TokensAPI:
    """API for the session token the client is using."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def validate(self) -> int:
        """
        Validate the configured token.

        Returns:
            Expiration as a Unix timestamp
        """
        return self._http.call(
            "GET",
            "/v1/auth/validate",
            Operation("validate token"),
            shape=int,
            envelope="exp",
        )

    def invalidate(self) -> int:
        """
        Invalidate all session tokens of the user.

        Returns:
            Unix timestamp from which new tokens are valid
        """
        return self._http.call(
            "POST",
            "/v1/auth/invalidate",
            Operation("invalidate sessions"),
            shape=int,
            envelope="validFrom",
        )
