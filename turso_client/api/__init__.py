"""
Turso API Client Package.

Structure:
    - client.py: Main TursoClient facade
    - _http.py: Request building, sending, scoping and uploads
    - _classify.py: Status code to exception mapping
    - _decode.py: JSON envelope decoding
    - _multipart.py: Streaming multipart bodies
    - databases.py, groups.py, instances.py, organizations.py,
      tokens.py, users.py, billing.py, locations.py, feedback.py:
      Domain APIs

Usage:
    from turso_client.api import TursoClient, get_client

    client = get_client(org="acme")
    databases = client.databases.list()
"""

from .client import TursoClient, get_client
from ._http import HTTPClient, Deadline, path_segment, scope_prefix, user_agent
from ._classify import Operation, classify_response
from ._decode import decode_response, decode_payload, encode_payload
from ._multipart import BoundedPipe, MultipartStream
from .databases import DatabasesAPI
from .groups import GroupsAPI
from .instances import InstancesAPI
from .organizations import OrganizationsAPI
from .tokens import ApiTokensAPI, TokensAPI
from .users import UsersAPI
from .billing import BillingAPI, InvoicesAPI, PlansAPI, SubscriptionsAPI
from .locations import LocationsAPI
from .feedback import FeedbackAPI

__all__ = [
    # Main client
    "TursoClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    "Deadline",
    "path_segment",
    "scope_prefix",
    "user_agent",
    "Operation",
    "classify_response",
    "decode_response",
    "decode_payload",
    "encode_payload",
    "BoundedPipe",
    "MultipartStream",
    # Domain APIs
    "DatabasesAPI",
    "GroupsAPI",
    "InstancesAPI",
    "OrganizationsAPI",
    "ApiTokensAPI",
    "TokensAPI",
    "UsersAPI",
    "BillingAPI",
    "InvoicesAPI",
    "PlansAPI",
    "SubscriptionsAPI",
    "LocationsAPI",
    "FeedbackAPI",
]
