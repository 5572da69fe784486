"""
Continuation token codec.

DynamoDB resumes a query from the `LastEvaluatedKey` of the previous page, a
dict of key attributes. Callers never see that dict: it is carried as an
opaque, URL-safe string.

Token Format (before base64):
    {"k": {"PartitionKey": "...", "RowKey": "..."}, "v": 1}

JSON is dumped with sorted keys and compact separators so the same key
always yields the same token.
"""

import base64
import binascii
import json
import logging
from typing import Callable, Dict, Iterator, Optional, TypeVar

from ..exceptions import InvalidTokenError
from ..models import Segment

logger = logging.getLogger(__name__)

TOKEN_VERSION = 1

T = TypeVar("T")


def serialize_token(native_key: Optional[Dict[str, str]]) -> Optional[str]:
    """Encode a LastEvaluatedKey as an opaque token; None stays None."""
    if native_key is None:
        return None

    payload = json.dumps(
        {"v": TOKEN_VERSION, "k": native_key},
        sort_keys=True,
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def deserialize_token(token: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Decode a token back into the key DynamoDB resumes from.

    Args:
        token: Token from a previous Segment, or None/"" for the first page

    Returns:
        ExclusiveStartKey dict, or None to start from the beginning

    Raises:
        InvalidTokenError: Token is not one this reader produced
    """
    if not token:
        return None

    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidTokenError("not a valid encoded token", e) from e

    if not isinstance(payload, dict):
        raise InvalidTokenError("unexpected token payload")

    version = payload.get("v")
    if version != TOKEN_VERSION:
        raise InvalidTokenError(f"unsupported token version {version!r}, expected {TOKEN_VERSION}")

    key = payload.get("k")
    if not isinstance(key, dict) or not key:
        raise InvalidTokenError("token carries no resume key")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in key.items()):
        raise InvalidTokenError("resume key must map attribute names to string values")

    return key


def iterate_segments(
    fetch: Callable[[Optional[str]], Segment[T]],
    continuation_token: Optional[str] = None
) -> Iterator[T]:
    """
    Yield every result across pages, replaying tokens until none is returned.

    Example:
        >>> events = list(iterate_segments(
        ...     lambda token: reader.get_active_container_timeline(start, end, token)
        ... ))
    """
    token = continuation_token
    pages = 0
    while True:
        segment = fetch(token)
        pages += 1
        yield from segment.results
        token = segment.continuation_token
        if token is None:
            logger.debug(f"Segment iteration finished after {pages} page(s)")
            return
