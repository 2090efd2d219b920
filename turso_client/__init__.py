"""
Turso Client - Python client for the Turso platform API.

Exposes the Turso control-plane HTTP API (organizations, databases, groups,
instances, tokens, billing) as typed operations.

Usage:
    from turso_client import TursoClient, ClientConfig

    with TursoClient(ClientConfig(token="...", org="acme")) as client:
        databases = client.databases.list()
"""

import logging

__version__ = "0.4.0"
__prog_name__ = "turso-client"

from .config import ClientConfig, DEFAULT_BASE_URL
from .api import TursoClient, get_client
from .exceptions import (
    TursoError,
    ConfigurationError,
    TransportError,
    UploadStreamError,
    DecodeError,
    APIError,
    NotOrganizationMemberError,
    NotFoundError,
    NameUnavailableError,
    PaymentRequiredError,
    ValidationError,
    PermissionDeniedError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "TursoClient",
    "get_client",
    "TursoError",
    "ConfigurationError",
    "TransportError",
    "UploadStreamError",
    "DecodeError",
    "APIError",
    "NotOrganizationMemberError",
    "NotFoundError",
    "NameUnavailableError",
    "PaymentRequiredError",
    "ValidationError",
    "PermissionDeniedError",
]
