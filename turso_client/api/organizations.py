"""
Organizations API - Organizations, members and invites.
"""

from typing import Optional, Dict, Any, List

from ._http import HTTPClient, path_segment
from ._classify import Operation
from ..exceptions import ConfigurationError
from ..models import Organization, OrganizationUsage, Member, Invite


class OrganizationsAPI:
    """
    API for organizations.

    Handles:
    - Organization CRUD and overages
    - Usage for the current scope
    - Members and invites of the configured organization
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Organizations API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def _org_path(self, suffix: str) -> str:
        """Path under the configured organization; members and invites need one."""
        if not self._http.org:
            raise ConfigurationError(
                "No organization set.",
                details="Members and invites are managed per organization."
            )
        return self._http.scoped_path(suffix)

    def list(self) -> List[Organization]:
        """List the organizations the user belongs to."""
        return self._http.call(
            "GET",
            "/v2/organizations",
            Operation("list organizations", "organization"),
            shape=List[Organization],
            envelope="organizations",
        )

    def create(
        self,
        name: str,
        stripe_id: Optional[str] = None,
        dry_run: bool = False,
    ) -> Organization:
        """
        Create an organization.

        Args:
            name: Organization name
            stripe_id: Stripe customer ID to attach
            dry_run: Validate without creating

        Raises:
            NameUnavailableError: If the name already exists
            PaymentRequiredError: If the plan must be upgraded first
        """
        data: Dict[str, Any] = {"name": name}
        if stripe_id:
            data["stripe_id"] = stripe_id

        return self._http.call(
            "POST",
            "/v1/organizations",
            Operation("create organization", "organization", name, creates=True),
            params={"dry_run": "true" if dry_run else "false"},
            json_data=data,
            shape=Organization,
            envelope="org",
        )

    def delete(self, slug: str) -> None:
        """Delete an organization."""
        self._http.call(
            "DELETE",
            f"/v1/organizations/{path_segment(slug)}",
            Operation("delete organization", "organization", slug),
        )

    def usage(self) -> OrganizationUsage:
        """Get usage for the configured organization (or the personal account)."""
        return self._http.call(
            "GET",
            self._http.scoped_path("/usage"),
            Operation("get organization usage", "organization", self._http.org or None),
            shape=OrganizationUsage,
            envelope="organization",
        )

    def set_overages(self, slug: str, enabled: bool) -> None:
        """Enable or disable overages for an organization."""
        self._http.call(
            "PATCH",
            f"/v1/organizations/{path_segment(slug)}",
            Operation("set overages", "organization", slug),
            json_data={"overages": enabled},
        )

    # ========== Members ==========

    def list_members(self) -> List[Member]:
        """List members of the configured organization."""
        return self._http.call(
            "GET",
            self._org_path("/members"),
            Operation("list organization members", "organization", self._http.org),
            shape=List[Member],
            envelope="members",
        )

    def add_member(self, username: str, role: str) -> None:
        """Add a user to the configured organization."""
        self._http.call(
            "POST",
            self._org_path("/members"),
            Operation("add organization member", "member", username),
            json_data={"username": username, "role": role},
        )

    def remove_member(self, username: str) -> None:
        """Remove a user from the configured organization."""
        self._http.call(
            "DELETE",
            self._org_path(f"/members/{path_segment(username)}"),
            Operation("remove organization member", "member", username),
        )

    # ========== Invites ==========

    def invite_member(self, email: str, role: str) -> None:
        """Invite someone to the configured organization by email."""
        self._http.call(
            "POST",
            self._org_path("/invite"),
            Operation("invite organization member", "invite", email),
            json_data={"email": email, "role": role},
        )

    def list_invites(self) -> List[Invite]:
        """List pending invites of the configured organization."""
        return self._http.call(
            "GET",
            self._org_path("/invites"),
            Operation("list invites", "organization", self._http.org),
            shape=List[Invite],
            envelope="invites",
        )

    def delete_invite(self, email: str) -> None:
        """Delete a pending invite."""
        self._http.call(
            "DELETE",
            self._org_path(f"/invites/{path_segment(email)}"),
            Operation("delete pending invite", "invite", email),
        )
