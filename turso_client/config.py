"""
Client configuration.

A ``ClientConfig`` is built once and never mutated, so one instance (and its
connection pool) can be shared by every resource API and every thread.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.turso.tech"
DEFAULT_TIMEOUT = 30.0
DEFAULT_POOL_SIZE = 10

ENV_TOKEN = "TURSO_API_TOKEN"
ENV_ORG = "TURSO_ORG"
ENV_BASE_URL = "TURSO_API_BASE_URL"
ENV_TIMEOUT = "TURSO_API_TIMEOUT"


def build_session(pool_size: int = DEFAULT_POOL_SIZE) -> requests.Session:
    """
    Create the default HTTP session.

    Retries are disabled: every operation is exactly one round trip.
    """
    session = requests.Session()

    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=Retry(total=0, read=False, redirect=False, raise_on_status=False),
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def _is_absolute_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration for the Turso API client.

    Attributes:
        token: API token sent as a bearer credential (required)
        org: Organization slug; empty means no organization scope
        base_url: API endpoint
        timeout: Connect/read timeout in seconds for each request
        verify_ssl: Verify TLS certificates
        session: HTTP session holding the connection pool
    """

    token: str = field(repr=False)
    org: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    session: requests.Session = field(default_factory=build_session, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigurationError(
                "No API token set.",
                details=f"Pass a token or set {ENV_TOKEN}."
            )
        if not self.base_url:
            raise ConfigurationError("No base URL set.")
        if not _is_absolute_url(self.base_url):
            raise ConfigurationError(f"Invalid base URL: {self.base_url!r}")
        if self.session is None:
            raise ConfigurationError("No HTTP session set.")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"Invalid timeout: {self.timeout!r}")
        # An org of None is treated like "no organization".
        if self.org is None:
            object.__setattr__(self, "org", "")

    @property
    def has_org(self) -> bool:
        """Check whether requests are scoped to an organization."""
        return bool(self.org)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """
        Build a configuration from environment variables.

        Keyword arguments take precedence over the environment.
        """
        values = {
            "token": os.environ.get(ENV_TOKEN, ""),
            "org": os.environ.get(ENV_ORG, ""),
            "base_url": os.environ.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
        }

        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {ENV_TIMEOUT}: {timeout!r}") from e

        values.update({k: v for k, v in overrides.items() if v is not None})

        logger.debug(
            "Configuration from environment: base_url=%s org=%s",
            values["base_url"],
            values["org"] or "-",
        )
        return cls(**values)

