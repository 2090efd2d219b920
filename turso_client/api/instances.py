"""
Instances API - Database instance (replica) management.
"""

from typing import List

from ._http import HTTPClient, path_segment
from ._classify import Operation
from ..models import Instance


class InstancesAPI:
    """API for the instances of a database."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def _path(self, database: str, suffix: str = "") -> str:
        return self._http.scoped_path(f"/databases/{path_segment(database)}/instances", suffix)

    def list(self, database: str) -> List[Instance]:
        """List the instances of a database."""
        return self._http.call(
            "GET",
            self._path(database),
            Operation(f"list instances of {database}", "database", database),
            shape=List[Instance],
            envelope="instances",
        )

    def create(self, database: str, location: str) -> Instance:
        """Create an instance of a database in a location."""
        return self._http.call(
            "POST",
            self._path(database),
            Operation(f"create new instance for {database}", "database", database),
            json_data={"location": location},
            shape=Instance,
            envelope="instance",
        )

    def delete(self, database: str, instance: str) -> None:
        """Destroy an instance."""
        self._http.call(
            "DELETE",
            self._path(database, f"/{path_segment(instance)}"),
            Operation(f"destroy instance of {database}", "instance", instance),
        )

    def wait(self, database: str, instance: str) -> None:
        """Block until an instance is ready."""
        self._http.call(
            "GET",
            self._path(database, f"/{path_segment(instance)}/wait"),
            Operation(f"wait for instance of {database}", "instance", instance),
        )
