"""
Users API - Current user.
"""

from ._http import HTTPClient
from ._classify import Operation
from ..models import UserInfo


class UsersAPI:
    """API for the authenticated user."""

    def __init__(self, http: HTTPClient):
        """
        Initialize Users API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def get_current(self) -> UserInfo:
        """Get the user the token belongs to."""
        return self._http.call(
            "GET",
            "/v1/current-user",
            Operation("get user info", "user"),
            shape=UserInfo,
            envelope="user",
        )
