"""
Exceptions raised by the Turso client.

Every failure surfaced by an API call is one of:

- ``TransportError``: the request never completed (DNS, TLS, refused
  connection, timeout, broken upload stream)
- ``DecodeError``: the response body is malformed or does not match the
  expected shape
- ``APIError`` subclasses: the server answered with a non-success status

``ConfigurationError`` is raised at construction time only.
"""

from typing import Optional, Dict, Any


class TursoError(Exception):
    """Base exception for all Turso client errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class ConfigurationError(TursoError):
    """Invalid client configuration (missing token, bad URL, no session)."""
    pass


class TransportError(TursoError):
    """The HTTP exchange failed before a response was received."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details=str(cause) if cause else None)
        self.operation = operation
        self.cause = cause


class UploadStreamError(TransportError):
    """The multipart producer failed while the request body was being sent."""
    pass


class DecodeError(TursoError):
    """The response body could not be decoded into the expected shape."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details=str(cause) if cause else None)
        self.operation = operation
        self.cause = cause


class APIError(TursoError):
    """The API answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        resource: Optional[str] = None,
        identifier: Optional[str] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation
        self.resource = resource
        self.identifier = identifier
        self.response_data = response_data or {}

    def __str__(self) -> str:
        text = super().__str__()
        if self.status_code is not None:
            return f"{text} [HTTP {self.status_code}]"
        return text


class NotOrganizationMemberError(APIError):
    """The token's user is not a member of the configured organization."""

    def __init__(self, org: str, **kwargs: Any):
        super().__init__(f"not a member of organization {org}", **kwargs)
        self.org = org


class NotFoundError(APIError):
    """Resource not found (404)."""
    pass


class NameUnavailableError(APIError):
    """The requested name is already taken (422/409 on create)."""
    pass


class PaymentRequiredError(APIError):
    """The operation needs a plan upgrade (402)."""
    pass


class ValidationError(APIError):
    """Any other rejected request, carrying the server's message."""
    pass


class PermissionDeniedError(ValidationError):
    """403 outside of an organization scope."""
    pass
