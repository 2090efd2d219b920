"""
Databases API - Database management.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List, Union, BinaryIO

from ._http import HTTPClient, path_segment
from ._classify import Operation
from ..models import (
    Database,
    CreatedDatabase,
    DatabaseSeed,
    DatabaseConfig,
    DatabaseStats,
    DatabaseUsage,
    PermissionsClaim,
)


def token_params(expiration: str, read_only: bool) -> Dict[str, Any]:
    """Query parameters for database and group token requests."""
    params: Dict[str, Any] = {"expiration": expiration}
    if read_only:
        params["authorization"] = "read-only"
    return params


def token_body(permissions: Optional[PermissionsClaim]) -> Dict[str, Any]:
    if permissions is None:
        return {}
    return {"permissions": permissions}


class DatabasesAPI:
    """
    API for database management.

    Handles:
    - Database CRUD and seeding
    - Auth tokens and key rotation
    - Stats, usage and configuration
    """

    SEGMENT = "/databases"

    def __init__(self, http: HTTPClient):
        """
        Initialize Databases API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def _path(self, suffix: str = "") -> str:
        return self._http.scoped_path(self.SEGMENT, suffix)

    def list(self) -> List[Database]:
        """List databases."""
        return self._http.call(
            "GET",
            self._path(),
            Operation("get database listing", "database"),
            shape=List[Database],
            envelope="databases",
        )

    def create(
        self,
        name: str,
        location: str,
        image: Optional[str] = None,
        extensions: Optional[str] = None,
        group: Optional[str] = None,
        schema: Optional[str] = None,
        is_schema: bool = False,
        seed: Optional[DatabaseSeed] = None,
    ) -> CreatedDatabase:
        """
        Create a database.

        Args:
            name: Database name
            location: Location code, e.g. "ams"
            image: Server image ("latest", "canary")
            extensions: Extensions to enable ("all")
            group: Group to create the database in
            schema: Parent schema database
            is_schema: Create a schema database
            seed: Seed source (another database or a dump)

        Returns:
            The created database and its username

        Raises:
            NameUnavailableError: If the name is taken
        """
        data: Dict[str, Any] = {"name": name, "location": location}
        if image:
            data["image"] = image
        if extensions:
            data["extensions"] = extensions
        if group:
            data["group"] = group
        if seed is not None:
            data["seed"] = seed
        if schema:
            data["schema"] = schema
        if is_schema:
            data["is_schema"] = True

        return self._http.call(
            "POST",
            self._path(),
            Operation("create database", "database", name, creates=True),
            json_data=data,
            shape=CreatedDatabase,
        )

    def delete(self, name: str) -> None:
        """Delete a database."""
        self._http.call(
            "DELETE",
            self._path(f"/{path_segment(name)}"),
            Operation("delete database", "database", name),
        )

    def seed(self, name: str, db_file: Union[str, Path, BinaryIO]) -> None:
        """
        Seed a database from a local SQLite file.

        Args:
            name: Database name
            db_file: Path or binary file object, streamed to the server
        """
        self._http.upload(
            self._path(f"/{path_segment(name)}/seed"),
            db_file,
            Operation("seed database", "database", name, creates=True),
        )

    def upload_dump(self, dump_file: Union[str, Path, BinaryIO]) -> str:
        """
        Upload a SQL dump for use as a seed.

        Returns:
            URL of the uploaded dump, usable in ``DatabaseSeed(type="dump", url=...)``
        """
        return self._http.upload(
            self._path("/dumps"),
            dump_file,
            Operation("upload the dump file", "dump"),
            shape=str,
            envelope="dump_url",
        )

    def token(
        self,
        name: str,
        expiration: str = "never",
        read_only: bool = False,
        permissions: Optional[PermissionsClaim] = None,
    ) -> str:
        """
        Create an auth token for a database.

        Args:
            name: Database name
            expiration: Token lifetime, e.g. "never", "7d"
            read_only: Restrict the token to reads
            permissions: Extra claims, e.g. databases readable via ATTACH

        Returns:
            The JWT
        """
        return self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/auth/tokens"),
            Operation("get database token", "database", name),
            params=token_params(expiration, read_only),
            json_data=token_body(permissions),
            shape=str,
            envelope="jwt",
        )

    def rotate(self, name: str) -> None:
        """Rotate the keys of a database, invalidating its tokens."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/auth/rotate"),
            Operation("rotate database keys", "database", name),
        )

    def update(self, name: str, group: bool = False) -> None:
        """Update a database (or its whole group) to the latest server version."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/update"),
            Operation("update database", "database", name),
            params={"group": "true"} if group else None,
        )

    def stats(self, name: str) -> DatabaseStats:
        """Get query stats for a database."""
        return self._http.call(
            "GET",
            self._path(f"/{path_segment(name)}/stats"),
            Operation("get stats for database", "database", name),
            shape=DatabaseStats,
        )

    def transfer(self, name: str, org: str) -> None:
        """Transfer a database to another organization."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/transfer"),
            Operation(f"transfer {name} database to org {org}", "database", name),
            json_data={"org": org},
        )

    def wakeup(self, name: str) -> None:
        """Wake up a sleeping database."""
        self._http.call(
            "POST",
            self._path(f"/{path_segment(name)}/wakeup"),
            Operation("wakeup database", "database", name),
        )

    def usage(self, name: str) -> DatabaseUsage:
        """Get usage for a database."""
        return self._http.call(
            "GET",
            self._path(f"/{path_segment(name)}/usage"),
            Operation("get database usage", "database", name),
            shape=DatabaseUsage,
            envelope="database",
        )

    def get_config(self, name: str) -> DatabaseConfig:
        """Get the configuration of a database."""
        return self._http.call(
            "GET",
            self._path(f"/{path_segment(name)}/configuration"),
            Operation("get config for database", "database", name),
            shape=DatabaseConfig,
        )

    def update_config(self, name: str, config: DatabaseConfig) -> None:
        """Update the configuration of a database."""
        self._http.call(
            "PATCH",
            self._path(f"/{path_segment(name)}/configuration"),
            Operation("update config for database", "database", name),
            json_data=config,
        )
