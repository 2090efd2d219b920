"""
Error classification for API responses.

Every resource API funnels its responses through ``classify_response`` so
that a given status code always maps to the same exception type.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from ..exceptions import (
    APIError,
    NotOrganizationMemberError,
    NotFoundError,
    NameUnavailableError,
    PaymentRequiredError,
    ValidationError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200


@dataclass(frozen=True)
class Operation:
    """
    Call-site context used to render errors.

    Attributes:
        name: What the call does, e.g. "create database"
        resource: Resource kind, e.g. "database"
        identifier: Name or ID of the resource, when known
        creates: Whether the call creates a named resource
    """

    name: str
    resource: Optional[str] = None
    identifier: Optional[str] = None
    creates: bool = False

    def describe(self) -> str:
        """Describe the target resource, e.g. "database 'mydb'"."""
        if self.resource and self.identifier:
            return f"{self.resource} '{self.identifier}'"
        return self.resource or "resource"


def _error_body(response: requests.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(response: requests.Response, data: Dict[str, Any]) -> str:
    """Extract the server's error message, falling back to the status line."""
    message = data.get("error")
    if isinstance(message, str) and message:
        return message
    if isinstance(message, dict) and message.get("message"):
        return str(message["message"])
    reason = response.reason or ""
    return f"{response.status_code} {reason}".strip()


def classify_response(
    response: requests.Response,
    *,
    org: str,
    operation: Operation,
) -> Optional[APIError]:
    """
    Map a completed exchange to an error, or None on success.

    Order matters: a 403 under an organization scope means the user is not
    a member of that organization, which has to win over the status-specific
    checks below.

    Args:
        response: Response with the status code and (unread) body
        org: Configured organization slug, empty when not scoped
        operation: Call-site context

    Returns:
        The error to raise, or None for a 200
    """
    status = response.status_code
    if status == SUCCESS_STATUS:
        return None

    data = _error_body(response)
    context = dict(
        status_code=status,
        operation=operation.name,
        resource=operation.resource,
        identifier=operation.identifier,
        response_data=data,
    )

    if status == 403 and org:
        error: APIError = NotOrganizationMemberError(org, **context)
    elif status == 404:
        error = NotFoundError(f"{operation.describe()} not found", **context)
    elif status in (409, 422) and operation.creates:
        name = operation.identifier or ""
        error = NameUnavailableError(
            f"{operation.resource or 'resource'} name '{name}' is not available",
            **context
        )
    elif status == 402:
        error = PaymentRequiredError(
            f"failed to {operation.name}: payment required, you need to upgrade your plan",
            **context
        )
    elif status == 403:
        error = PermissionDeniedError(
            f"failed to {operation.name}: {_error_message(response, data)}",
            **context
        )
    else:
        error = ValidationError(
            f"failed to {operation.name}: {_error_message(response, data)}",
            **context
        )

    logger.debug(
        "API error [%s] status=%d -> %s",
        operation.name,
        status,
        type(error).__name__,
    )
    return error
