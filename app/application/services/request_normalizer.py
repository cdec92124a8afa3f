"""Request body normalization.

Turns whatever the host handed us (raw bytes, text, an already parsed mapping,
or nothing) into one JSON object. Methods that do not carry a body bypass
parsing entirely.
"""

import json
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl

import structlog

from app.core.exceptions import MalformedBodyError, PayloadTooLargeError

logger = structlog.get_logger(__name__)

RawBody = Union[bytes, bytearray, str, Mapping[str, Any], None]

METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def _parse_text(text: str, content_type: Optional[str]) -> Dict[str, Any]:
    if not text.strip():
        return {}

    if _media_type(content_type) == FORM_CONTENT_TYPE:
        return dict(parse_qsl(text, keep_blank_values=True))

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as exc:
        logger.warning("Could not parse request body as JSON", error=str(exc))
        raise MalformedBodyError(details={"reason": "Could not parse the JSON body"}) from exc

    if not isinstance(parsed, dict):
        raise MalformedBodyError(details={"reason": "Expected a JSON object"})
    return parsed


def normalize_body(
    method: str,
    body: RawBody,
    content_type: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> Dict[str, Any]:
    """Return the request body as a dict or raise MalformedBodyError."""
    logger.debug("Normalizing request body", method=method, body_type=type(body).__name__)

    if isinstance(body, Mapping):
        return dict(body)

    if method.upper() not in METHODS_WITH_BODY or body is None:
        return {}

    if isinstance(body, (bytes, bytearray)):
        if max_bytes is not None and len(body) > max_bytes:
            raise PayloadTooLargeError(max_bytes)
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedBodyError(details={"reason": "Body is not valid UTF-8"}) from exc
    elif max_bytes is not None and len(body.encode("utf-8")) > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    return _parse_text(body, content_type)
