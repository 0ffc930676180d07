"""Normalization of handler outcomes into a canonical response.

Every variant, including malformed ones, maps to some response: the
normalizer converts its own failures into a 500 instead of raising.
"""

import base64
import json
import traceback
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from fnruntime.exceptions.handlers import describe_error, get_status_code_for_error, is_http_status
from fnruntime.exceptions.invocation_errors import HandlerError, MalformedResultError
from fnruntime.invocation.models import (
    DEFAULT_STATUS_CODE,
    JSON_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    CanonicalResponse,
    Response,
)
from fnruntime.invocation.results import (
    DescriptorResult,
    EmptyResult,
    ErrorResult,
    MalformedResult,
    PairResult,
    ResultVariant,
    StringResult,
    StructuredResult,
)
from fnruntime.logging.logger import get_logger

logger = get_logger(__name__)


def _json_default(value: object) -> object:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, UUID | Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, set | frozenset):
        return list(value)
    if isinstance(value, bytes | bytearray):
        return base64.b64encode(value).decode("ascii")
    error_message = f"Object of type '{type(value).__name__}' is not JSON serializable"
    raise TypeError(error_message)


def encode_json(value: object) -> bytes:
    """Serialize a value as compact UTF-8 JSON.

    Raises:
        MalformedResultError: If the value cannot be encoded.
    """
    try:
        encoded = json.dumps(
            value,
            default=_json_default,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as error:
        raise MalformedResultError(
            f"Handler result could not be encoded as JSON: {error}",
            result_type=type(value).__name__,
        ) from error
    return encoded.encode("utf-8")


def _encode_text(body: str | bytes) -> bytes:
    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def _encode_payload(payload: object) -> tuple[bytes, str]:
    """Encode a pair payload or descriptor body, returning body and content type."""
    if isinstance(payload, str | bytes):
        return _encode_text(payload), TEXT_CONTENT_TYPE
    if isinstance(payload, bytearray):
        return bytes(payload), TEXT_CONTENT_TYPE
    return encode_json(payload), JSON_CONTENT_TYPE


def _encode_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    if headers is None:
        return {}
    if not isinstance(headers, Mapping):
        raise MalformedResultError(
            "Response headers must be a mapping",
            result_type=type(headers).__name__,
        )
    return {str(key): str(value) for key, value in headers.items()}


def _checked_status(status_code: object) -> int:
    if not is_http_status(status_code):
        raise MalformedResultError(
            f"Status code must be an integer between 100 and 599, got {status_code!r}",
            result_type=type(status_code).__name__,
        )
    return int(status_code)


def _from_descriptor(descriptor: Response) -> CanonicalResponse:
    status_code = DEFAULT_STATUS_CODE if descriptor.status_code is None else descriptor.status_code

    if descriptor.body is None:
        body, content_type = b"", TEXT_CONTENT_TYPE
    else:
        body, content_type = _encode_payload(descriptor.body)

    if descriptor.content_type is not None:
        if not isinstance(descriptor.content_type, str):
            raise MalformedResultError(
                "Response content_type must be a string",
                result_type=type(descriptor.content_type).__name__,
            )
        content_type = descriptor.content_type

    return CanonicalResponse(
        status_code=_checked_status(status_code),
        headers=_encode_headers(descriptor.headers),
        content_type=content_type,
        body=body,
    )


def create_error_response(
    error: BaseException,
    *,
    include_traceback: bool = False,
) -> CanonicalResponse:
    """Build the response for an error that ended an invocation.

    Args:
        error: The error, usually a HandlerError wrapping the handler's exception.
        include_traceback: Whether to append the traceback to the body.

    Returns:
        Plain-text response carrying the error's status and description.
    """
    body = describe_error(error)

    if include_traceback:
        cause = error.cause if isinstance(error, HandlerError) and error.cause is not None else error
        formatted = "".join(traceback.format_exception(cause))
        body = f"{body}\n{formatted}"

    return CanonicalResponse(
        status_code=get_status_code_for_error(error),
        content_type=TEXT_CONTENT_TYPE,
        body=body.encode("utf-8"),
    )


def _normalize(variant: ResultVariant, include_traceback: bool) -> CanonicalResponse:
    match variant:
        case ErrorResult(error=error):
            return create_error_response(error, include_traceback=include_traceback)
        case PairResult(status_code=status_code, payload=payload):
            body, content_type = _encode_payload(payload)
            return CanonicalResponse(
                status_code=_checked_status(status_code),
                content_type=content_type,
                body=body,
            )
        case StringResult(body=body):
            return CanonicalResponse(content_type=TEXT_CONTENT_TYPE, body=_encode_text(body))
        case StructuredResult(value=value):
            return CanonicalResponse(content_type=JSON_CONTENT_TYPE, body=encode_json(value))
        case DescriptorResult(descriptor=descriptor):
            return _from_descriptor(descriptor)
        case EmptyResult():
            return CanonicalResponse()
        case MalformedResult(reason=reason, result_type=result_type):
            raise MalformedResultError(reason, result_type=result_type)
        case _:
            raise MalformedResultError(
                "Unknown result variant",
                result_type=type(variant).__name__,
            )


def normalize(variant: ResultVariant, *, include_traceback: bool = False) -> CanonicalResponse:
    """Turn a classified handler outcome into a canonical response.

    Args:
        variant: The classified outcome of an invocation.
        include_traceback: Whether error bodies carry the traceback.

    Returns:
        The canonical response. Never raises.
    """
    try:
        return _normalize(variant, include_traceback)
    except MalformedResultError as error:
        logger.warning("Handler result is malformed", extra={"error": error.to_log_dict()})
        return create_error_response(error)
    except Exception as error:
        malformed = MalformedResultError(
            f"Handler result could not be normalized: {describe_error(error)}",
            result_type=type(variant).__name__,
        )
        logger.exception("Failed to normalize handler result", extra={"error": malformed.to_log_dict()})
        return create_error_response(malformed)
