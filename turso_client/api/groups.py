"""
Groups API - Database group management.
"""

from typing import Optional, Dict, Any, List

from ._http import HTTPClient, path_segment
from ._classify import Operation
from .databases import token_params, token_body
from ..models import Group, PermissionsClaim


class GroupsAPI:
    """
    API for database groups.

    Handles:
    - Group CRUD and archiving
    - Group locations
    - Group tokens, updates and transfers
    """

    SEGMENT = "/groups"

    def __init__(self, http: HTTPClient):
        """
        Initialize Groups API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def _path(self, suffix: str = "") -> str:
        return self._http.scoped_path(self.SEGMENT, suffix)

    def list(self) -> List[Group]:
        """List groups."""
        return self._http.call(
            "GET",
            self._path(),
            Operation("get database groups", "group"),
            shape=List[Group],
            envelope="groups",
        )

    def get(self, name: str) -> Group:
        """Get a group by name."""
        return self._http.call(
            "GET",
            self._path(f"/{path_segment(name)}"),
            Operation("get database group", "group", name),
            shape=Group,
            envelope="group",
        )

    def create(self, name: str, location: str, version: Optional[str] = None) -> None:
        """
        Create a group.

        Args:
            name: Group name
            location: Primary location code
            version: Server version ("latest", "canary")

        Raises:
            NameUnavailableError: If the name is taken
        """
        data: Dict[str, Any] = {"name": name, "location": location}
        if version:
            data["version"] = version

        self._http.call(
            "POST",
            self._path(),
            Operation("create group", "group", name, creates=True),
            json_data=data,
        )

    def delete(self, name: str) -> None:
        """Delete a group."""
        self._http.call(
            "DELETE",
            self._path(f"/{path_segment(name)}"),
            Operation("delete group", "group", name),
        )

    def unarchive(self, name: str) -> None:
        """Unarchive a group."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/unarchive"),
            Operation("unarchive group", "group", name),
        )

    def add_location(self, name: str, location: str) -> None:
        """Add a location to a group."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/locations/{path_segment(location)}"),
            Operation(f"add location {location} to group", "group", name),
        )

    def remove_location(self, name: str, location: str) -> None:
        """Remove a location from a group."""
        self._http.call(
            "DELETE",
            self._path(f"/{path_segment(name)}/locations/{path_segment(location)}"),
            Operation(f"remove location {location} from group", "group", name),
        )

    def wait_location(self, name: str, location: str) -> None:
        """Block until a newly added group location is ready."""
        self._http.call(
            "GET",
            self._path(f"/{path_segment(name)}/locations/{path_segment(location)}/wait"),
            Operation(f"wait for location {location} of group", "group", name),
        )

    def token(
        self,
        name: str,
        expiration: str = "never",
        read_only: bool = False,
        permissions: Optional[PermissionsClaim] = None,
    ) -> str:
        """
        Create an auth token valid for every database in a group.

        Returns:
            The JWT
        """
        return self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/auth/tokens"),
            Operation("get group token", "group", name),
            params=token_params(expiration, read_only),
            json_data=token_body(permissions),
            shape=str,
            envelope="jwt",
        )

    def rotate(self, name: str) -> None:
        """Rotate the keys of a group."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/auth/rotate"),
            Operation("rotate group keys", "group", name),
        )

    def update(
        self,
        name: str,
        version: Optional[str] = None,
        extensions: Optional[str] = None,
    ) -> None:
        """Update the server version or extensions of a group."""
        data: Dict[str, Any] = {}
        if version:
            data["version"] = version
        if extensions:
            data["extensions"] = extensions

        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/update"),
            Operation("update group", "group", name),
            json_data=data,
        )

    def transfer(self, name: str, to: str) -> None:
        """Transfer a group to another organization."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/transfer"),
            Operation(f"transfer group to {to}", "group", name),
            json_data={"organization": to},
        )
