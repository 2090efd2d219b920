"""
Locations API - Available regions.
"""

from typing import Dict, List

from ._http import HTTPClient, path_segment
from ._classify import Operation
from ..models import LocationDetails

# Geo-routed endpoint answering with the closest region; not on the API host.
CLOSEST_REGION_URL = "https://region.turso.io"


class LocationsAPI:
    """
    API for locations.

    Handles:
    - Location listing and details
    - Closest location lookup
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Locations API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self) -> Dict[str, str]:
        """
        List locations.

        Returns:
            Mapping of location code to description
        """
        return self._http.call(
            "GET",
            "/v1/locations",
            Operation("get locations", "location"),
            shape=Dict[str, str],
            envelope="locations",
        )

    def get(self, code: str) -> LocationDetails:
        """Get a location and the locations closest to it."""
        return self._http.call(
            "GET",
            f"/v1/locations/{path_segment(code)}",
            Operation(f"get location {code}", "location", code),
            shape=LocationDetails,
            envelope="location",
        )

    def closest(self) -> str:
        """Get the code of the location closest to the caller."""
        return self._http.call(
            "GET",
            CLOSEST_REGION_URL,
            Operation("get closest location", "location"),
            shape=str,
            envelope="server",
        )
