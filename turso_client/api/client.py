"""
Turso API Client - Main facade for all API operations.

All resource APIs share one ``HTTPClient`` and therefore one configuration
and one connection pool.
"""

from typing import Optional, Any

from ..config import ClientConfig
from ._http import HTTPClient
from .databases import DatabasesAPI
from .groups import GroupsAPI
from .instances import InstancesAPI
from .organizations import OrganizationsAPI
from .tokens import ApiTokensAPI, TokensAPI
from .users import UsersAPI
from .billing import BillingAPI, InvoicesAPI, PlansAPI, SubscriptionsAPI
from .locations import LocationsAPI
from .feedback import FeedbackAPI


class TursoClient:
    """
    Client for the Turso platform API.

    Usage:
        client = TursoClient(ClientConfig(token="...", org="acme"))
        databases = client.databases.list()
        group = client.groups.get("default")

    The client is safe to share between threads: its configuration is
    read-only and the underlying session pools connections.
    """

    def __init__(self, config: ClientConfig):
        """
        Initialize the API client.

        Args:
            config: Client configuration
        """
        self._http = HTTPClient(config)

        # Domain-specific API modules
        self.databases = DatabasesAPI(self._http)
        self.groups = GroupsAPI(self._http)
        self.instances = InstancesAPI(self._http)
        self.organizations = OrganizationsAPI(self._http)
        self.api_tokens = ApiTokensAPI(self._http)
        self.tokens = TokensAPI(self._http)
        self.users = UsersAPI(self._http)
        self.billing = BillingAPI(self._http)
        self.invoices = InvoicesAPI(self._http)
        self.plans = PlansAPI(self._http)
        self.subscriptions = SubscriptionsAPI(self._http)
        self.locations = LocationsAPI(self._http)
        self.feedback = FeedbackAPI(self._http)

    @property
    def config(self) -> ClientConfig:
        """Get the configuration."""
        return self._http.config

    @property
    def org(self) -> str:
        """Get the organization scope ("" when not scoped)."""
        return self._http.org

    @property
    def base_url(self) -> str:
        """Get the base URL for API requests."""
        return self._http.base_url

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the HTTP session."""
        self._http.close()

    def __enter__(self) -> "TursoClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# Convenience function for quick API access
def get_client(
    token: Optional[str] = None,
    org: Optional[str] = None,
    **options: Any
) -> TursoClient:
    """
    Get an API client instance.

    Missing values are read from the environment (TURSO_API_TOKEN,
    TURSO_ORG, TURSO_API_BASE_URL, TURSO_API_TIMEOUT).

    Args:
        token: API token
        org: Organization slug
        **options: Other ClientConfig fields (base_url, timeout, session, ...)

    Returns:
        TursoClient instance
    """
    return TursoClient(ClientConfig.from_env(token=token, org=org, **options))
