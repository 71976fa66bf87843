import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union
from urllib.parse import urlencode

from .errors import ConfigurationError, EncodeError

JSON_CONTENT_TYPE = "application/json"
METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Union[bytes, None] = None


def _format_query_value(value: Any) -> str:
    # Match the JSON/JavaScript rendering of booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(query: Union[Mapping[str, Any], None]) -> str:
    """Serialize ``query`` in iteration order, skipping None values.

    List/tuple values repeat the key once per item.
    """
    if not query:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _format_query_value(v)) for v in value if v is not None)
        else:
            pairs.append((key, _format_query_value(value)))
    return urlencode(pairs)


def build_url(base_url: str, path: str, query: Union[Mapping[str, Any], None] = None) -> str:
    if not base_url:
        raise ConfigurationError("base_url is required")
    path = path or ""
    if path.startswith(("http://", "https://")):
        url = path
    elif path:
        url = base_url.rstrip("/") + "/" + path.lstrip("/")
    else:
        url = base_url
    qs = build_query_string(query)
    if qs:
        url += ("&" if "?" in url else "?") + qs
    return url


def merge_headers(
    default_headers: Union[Mapping[str, str], None],
    headers: Union[Mapping[str, str], None],
) -> dict[str, str]:
    """Merge header mappings; later names win, compared case-insensitively."""
    merged: dict[str, str] = {}
    for source in (default_headers or {}, headers or {}):
        for name, value in source.items():
            for existing in [k for k in merged if k.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


def encode_body(body: Any, headers: dict[str, str]) -> Union[bytes, None]:
    """Serialize ``body``; sets the JSON content type unless one was given.

    With an explicit content type, str/bytes bodies go out untouched.
    """
    if body is None:
        return None
    if _has_header(headers, "Content-Type"):
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode("utf-8")
    else:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    try:
        return json.dumps(body).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Request body is not JSON serializable: {e}", cause=e) from e


def build_request(
    method: str,
    base_url: str,
    path: str,
    query: Union[Mapping[str, Any], None] = None,
    body: Any = None,
    default_headers: Union[Mapping[str, str], None] = None,
    headers: Union[Mapping[str, str], None] = None,
) -> RequestDescriptor:
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"Unsupported method: {method}")
    url = build_url(base_url, path, query)
    merged = merge_headers(default_headers, headers)
    payload = encode_body(body, merged)
    return RequestDescriptor(method=method, url=url, headers=merged, body=payload)
