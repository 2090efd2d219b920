"""
Billing API - Billing portal, invoices, plans and subscriptions.
"""

from typing import Optional, Dict, Any, List

from ._http import HTTPClient
from ._classify import Operation
from ..models import Invoice, Plan, Subscription


class BillingAPI:
    """API for the billing portal."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def portal(self) -> str:
        """
        Open a billing portal session.

        Returns:
            URL of the portal session
        """
        return self._http.call(
            "POST",
            self._http.scoped_path("/billing/portal"),
            Operation("get billing portal", "organization", self._http.org or None),
            shape=str,
            envelope="url",
        )


class InvoicesAPI:
    """API for invoices."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self) -> List[Invoice]:
        """List invoices."""
        return self._http.call(
            "GET",
            self._http.scoped_path("/invoices"),
            Operation("get invoices", "invoice"),
            shape=List[Invoice],
            envelope="invoices",
        )


class PlansAPI:
    """API for available plans."""

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self) -> List[Plan]:
        """List plans and their quotas."""
        return self._http.call(
            "GET",
            "/v1/plans",
            Operation("list plans", "plan"),
            shape=List[Plan],
            envelope="plans",
        )


class SubscriptionsAPI:
    """
    API for the plan subscription of the current scope.

    Handles:
    - Reading the current subscription
    - Changing plan, timeline and overages
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Subscriptions API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def get(self) -> Subscription:
        """Get the current subscription."""
        return self._http.call(
            "GET",
            self._http.scoped_path("/subscription"),
            Operation("get organization plan", "subscription"),
            shape=Subscription,
            envelope="subscription",
        )

    def update(
        self,
        plan: str,
        timeline: Optional[str] = None,
        overages: Optional[bool] = None,
    ) -> None:
        """
        Change the subscription.

        Args:
            plan: Plan name
            timeline: Billing timeline ("monthly", "yearly")
            overages: Enable or disable overages; None leaves them unchanged

        Raises:
            PaymentRequiredError: If a payment method is needed first
        """
        data: Dict[str, Any] = {"plan": plan}
        if timeline:
            data["timeline"] = timeline
        if overages is not None:
            data["overages"] = overages

        self._http.call(
            "POST",
            self._http.scoped_path("/subscription"),
            Operation("set organization plan", "subscription", plan),
            json_data=data,
        )
