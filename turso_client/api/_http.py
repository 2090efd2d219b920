"""
Base HTTP client for the Turso API.

Every resource API goes through ``HTTPClient.call``:
scope the path, build the request, send it once, classify the status,
decode the body, and release the connection.
"""

import os
import re
import time
import socket
import logging
import platform
import threading
from contextlib import contextmanager
from typing import Optional, Dict, Any, Iterator, Union, BinaryIO
from urllib.parse import urljoin, urlparse, quote

import requests
import urllib3

from .. import __version__, __prog_name__
from ..config import ClientConfig
from ..exceptions import TransportError, UploadStreamError, ConfigurationError
from ._classify import Operation, classify_response
from ._decode import decode_response, encode_payload
from ._multipart import MultipartStream

logger = logging.getLogger(__name__)

# RFC 7230 token characters.
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
}


def user_agent() -> str:
    """User-Agent of the form ``turso-client/<version> (<os>/<arch>)``."""
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower()
    arch = _ARCH_ALIASES.get(machine, machine or "unknown")
    return f"{__prog_name__}/{__version__} ({system}/{arch})"


def scope_prefix(segment: str, org: str) -> str:
    """
    Prefix a resource segment with the API version and organization scope.

    ``/databases`` becomes ``/v1/organizations/<org>/databases`` when an
    organization is set, ``/v1/databases`` otherwise.
    """
    if org:
        return f"/v1/organizations/{path_segment(org)}{segment}"
    return f"/v1{segment}"


def path_segment(value: Any) -> str:
    """Percent-encode a caller-supplied value for use as one path segment."""
    return quote(str(value), safe="")


class Deadline:
    """
    Time budget for one call, measured from its start.

    ``requests`` applies its timeout to each socket operation; a server that
    keeps sending a byte at a time never trips it. The deadline bounds the
    call as a whole.
    """

    def __init__(self, timeout: Optional[float]):
        self.timeout = timeout
        self._expires = time.monotonic() + timeout if timeout is not None else None

    def remaining(self) -> Optional[float]:
        """Seconds left, or None without a timeout."""
        if self._expires is None:
            return None
        return max(self._expires - time.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        return self._expires is not None and time.monotonic() >= self._expires


def _abort(response: requests.Response, fired: threading.Event) -> None:
    """Unblock a reader waiting on the response's socket."""
    fired.set()
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        logger.debug(f"Socket already closed on deadline: {e}")


class HTTPClient:
    """
    Base HTTP client for the Turso API.

    Handles:
    - Request building (URL resolution, auth and client headers)
    - Sending exactly one request per call
    - Error classification and body decoding
    - Streaming multipart uploads
    """

    def __init__(self, config: ClientConfig):
        """
        Initialize the HTTP client.

        Args:
            config: Client configuration
        """
        if config is None:
            raise ConfigurationError("No client configuration set.")
        self.config = config
        self._user_agent = user_agent()

    @property
    def session(self) -> requests.Session:
        """Shared HTTP session."""
        return self.config.session

    @property
    def org(self) -> str:
        return self.config.org

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def scoped_path(self, segment: str, suffix: str = "") -> str:
        """Build an organization-scoped path for a resource segment."""
        return scope_prefix(segment, self.config.org) + suffix

    def _get_headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        """Get request headers including authentication."""
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
        }

        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"

        if content_type:
            headers["Content-Type"] = content_type

        return headers

    def build_request(
        self,
        method: str,
        path: str,
        *,
        json_data: Any = None,
        body: Any = None,
        content_type: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.PreparedRequest:
        """
        Build a request without sending it.

        Args:
            method: HTTP method
            path: Path relative to the base URL, or an absolute URL
            json_data: Body to send as JSON
            body: Raw body (bytes or an iterator of bytes)
            content_type: Content type of ``body``
            params: Query parameters; None values are dropped

        Returns:
            Prepared request

        Raises:
            TransportError: If the URL or method is invalid
        """
        if not method or not _METHOD_RE.fullmatch(method):
            raise TransportError(f"Invalid HTTP method: {method!r}")

        try:
            url = urljoin(self.config.base_url, path)
            parsed = urlparse(url)
        except ValueError as e:
            raise TransportError(f"Invalid request URL for path {path!r}: {e}", cause=e) from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise TransportError(f"Invalid request URL: {url!r}")

        if json_data is not None:
            body = encode_payload(json_data)
            content_type = "application/json"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        request = requests.Request(
            method=method.upper(),
            url=url,
            headers=self._get_headers(content_type if body is not None else None),
            params=params or None,
            data=body,
        )

        try:
            return self.session.prepare_request(request)
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"Could not build request {method} {url}: {e}", cause=e) from e

    def send(
        self,
        prepared: requests.PreparedRequest,
        *,
        operation: Optional[Operation] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """
        Send a prepared request once.

        The response body is not read; the caller must close the response
        (see ``open``).

        Raises:
            TransportError: On any network-level failure or timeout
        """
        name = operation.name if operation else None
        if timeout is None:
            timeout = self.config.timeout
        if timeout is not None and timeout <= 0:
            raise TransportError(self._failure(name, "request timed out before it was sent"), operation=name)

        logger.debug(f"Request: {prepared.method} {prepared.url}")

        settings = self.session.merge_environment_settings(
            prepared.url, {}, True, self.config.verify_ssl, None
        )

        try:
            response = self.session.send(prepared, timeout=timeout, **settings)
        except requests.exceptions.Timeout as e:
            raise TransportError(self._failure(name, f"request timed out: {e}"), operation=name, cause=e) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(self._failure(name, f"connection failed: {e}"), operation=name, cause=e) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(self._failure(name, f"request failed: {e}"), operation=name, cause=e) from e
        except UploadStreamError as e:
            # Raised by the multipart producer while the body was being sent.
            raise type(e)(self._failure(name, e.message), operation=name, cause=e.cause or e) from e

        logger.debug(f"Response: {response.status_code}")
        return response

    @staticmethod
    def _failure(operation: Optional[str], reason: str) -> str:
        if operation:
            return f"failed to {operation}: {reason}"
        return reason

    @contextmanager
    def open(
        self,
        method: str,
        path: str,
        *,
        operation: Optional[Operation] = None,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> Iterator[requests.Response]:
        """Send a request and close the response when the block exits."""
        prepared = self.build_request(method, path, **kwargs)
        response = self.send(prepared, operation=operation, timeout=timeout)
        try:
            yield response
        finally:
            response.close()

    def _deadline(self, timeout: Optional[float]) -> Deadline:
        return Deadline(timeout if timeout is not None else self.config.timeout)

    def _read_body(self, response: requests.Response, operation: Operation, deadline: Deadline) -> None:
        """
        Read the whole body before the deadline expires.

        A watchdog shuts the socket down when the budget runs out, so a
        server that drips the body cannot hold the call open.

        Raises:
            TransportError: If the deadline expires or the read fails
        """
        name = operation.name
        remaining = deadline.remaining()
        fired = threading.Event()
        timer = None
        if remaining is not None:
            timer = threading.Timer(remaining, _abort, args=(response, fired))
            timer.daemon = True
            timer.start()

        try:
            body = response.content
        except (requests.RequestException, urllib3.exceptions.HTTPError, OSError) as e:
            if fired.is_set() or deadline.expired:
                raise TransportError(
                    self._failure(name, f"request timed out after {deadline.timeout}s"),
                    operation=name,
                    cause=e,
                ) from e
            raise TransportError(
                self._failure(name, f"reading response failed: {e}"),
                operation=name,
                cause=e,
            ) from e
        finally:
            if timer is not None:
                timer.cancel()

        logger.debug(f"Response body: {len(body or b'')} bytes")

        # Shutting the socket down can look like a clean end of body.
        if fired.is_set():
            raise TransportError(
                self._failure(name, f"request timed out after {deadline.timeout}s"),
                operation=name,
            )

    def _handle_response(
        self,
        response: requests.Response,
        operation: Operation,
        deadline: Deadline,
        shape: Any = None,
        envelope: Optional[str] = None,
    ) -> Any:
        """Raise the classified error, or decode the body into ``shape``."""
        self._read_body(response, operation, deadline)
        error = classify_response(response, org=self.config.org, operation=operation)
        if error is not None:
            raise error
        if shape is None:
            return None
        return decode_response(response, shape, envelope, operation.name)

    def call(
        self,
        method: str,
        path: str,
        operation: Operation,
        *,
        json_data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        shape: Any = None,
        envelope: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method
            path: API path (see ``scoped_path``) or absolute URL
            operation: Call-site context for error messages
            json_data: JSON body
            params: Query parameters
            shape: Type to decode the body into; None skips decoding
            envelope: Key wrapping the payload in the response object
            timeout: Total time budget for the call in seconds

        Returns:
            Decoded response, or None when no shape is given
        """
        deadline = self._deadline(timeout)
        with self.open(
            method,
            path,
            operation=operation,
            timeout=deadline.remaining(),
            json_data=json_data,
            params=params,
        ) as response:
            return self._handle_response(response, operation, deadline, shape, envelope)

    def upload(
        self,
        path: str,
        source: Union[str, "os.PathLike[str]", BinaryIO],
        operation: Operation,
        *,
        shape: Any = None,
        envelope: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Upload a file as multipart/form-data (field ``file``) without
        reading it into memory.

        Args:
            path: API path
            source: File path or binary file object
            operation: Call-site context for error messages
            timeout: Total time budget in seconds, including sending the file

        Raises:
            TransportError: If the file cannot be opened or streaming fails
        """
        deadline = self._deadline(timeout)
        if isinstance(source, (str, os.PathLike)):
            try:
                fileobj: BinaryIO = open(source, "rb")
            except OSError as e:
                raise TransportError(
                    self._failure(operation.name, f"cannot open {source}: {e}"),
                    operation=operation.name,
                    cause=e,
                ) from e
            owned = True
        else:
            fileobj = source
            owned = False

        try:
            with MultipartStream(fileobj) as stream:
                prepared = self.build_request(
                    "POST",
                    path,
                    body=iter(stream),
                    content_type=stream.content_type,
                )
                response = self.send(prepared, operation=operation, timeout=deadline.remaining())
            try:
                return self._handle_response(response, operation, deadline, shape, envelope)
            finally:
                response.close()
        finally:
            if owned:
                fileobj.close()

    def close(self) -> None:
        """Close the HTTP session."""
        self.config.session.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
