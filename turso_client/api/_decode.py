"""
Response body decoding.

The API wraps most payloads in a single-key object (``{"database": {...}}``)
but answers some calls with a bare object. ``decode_response`` handles both:
pass ``envelope`` to select the wrapped value, omit it to decode the
top-level value.
"""

import json
from typing import Optional, Any, Dict, Type, TypeVar, Union

import requests
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import DecodeError

T = TypeVar("T")

_adapters: Dict[Any, TypeAdapter] = {}


def _adapter(shape: Any) -> TypeAdapter:
    try:
        return _adapters[shape]
    except (KeyError, TypeError):
        pass
    adapter = TypeAdapter(shape)
    try:
        _adapters[shape] = adapter
    except TypeError:
        pass
    return adapter


def _unwrap(data: Any, envelope: str) -> Any:
    if not isinstance(data, dict):
        raise KeyError(f"expected an object with key '{envelope}', got {type(data).__name__}")
    if envelope in data:
        return data[envelope]
    # The API is not consistent about key casing ("Jwt" vs "jwt").
    wanted = envelope.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == wanted:
            return value
    raise KeyError(f"missing key '{envelope}'")


def decode_payload(
    data: Any,
    shape: Union[Type[T], Any],
    envelope: Optional[str] = None,
    operation: Optional[str] = None,
) -> T:
    """
    Validate already-parsed JSON into ``shape``.

    Args:
        data: Parsed JSON value
        shape: Target type (model class, List[Model], str, int, ...)
        envelope: Key of the wrapping object holding the payload
        operation: Operation name for error messages

    Raises:
        DecodeError: If the envelope is missing or the value does not match
    """
    try:
        value = _unwrap(data, envelope) if envelope else data
        return _adapter(shape).validate_python(value)
    except (KeyError, PydanticValidationError) as e:
        what = f"failed to {operation}" if operation else "failed"
        raise DecodeError(
            f"{what}: could not decode response body",
            operation=operation,
            cause=e,
        ) from e


def decode_response(
    response: requests.Response,
    shape: Union[Type[T], Any],
    envelope: Optional[str] = None,
    operation: Optional[str] = None,
) -> T:
    """
    Decode a JSON response body into ``shape``.

    Raises:
        DecodeError: On malformed JSON or a shape mismatch
    """
    try:
        data = json.loads(response.content or b"null")
    except (ValueError, UnicodeDecodeError) as e:
        what = f"failed to {operation}" if operation else "failed"
        raise DecodeError(
            f"{what}: response is not valid JSON",
            operation=operation,
            cause=e,
        ) from e

    return decode_payload(data, shape, envelope, operation)


def encode_payload(value: Any) -> bytes:
    """Serialize a request body to JSON bytes."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        value = _adapter(type(value)).dump_python(value, mode="json", by_alias=True, exclude_none=True)
    return json.dumps(value).encode("utf-8")
