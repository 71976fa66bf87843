import json
from typing import Any, Union

from .errors import HttpError, ParseError
from .types import FatalFailure, RawResponse, Success

NO_CONTENT = 204


def is_json_content_type(content_type: Union[str, None]) -> bool:
    if not content_type:
        return False
    media = content_type.split(";", 1)[0].strip().lower()
    return media == "application/json" or media.endswith("+json")


def _charset(content_type: Union[str, None]) -> str:
    for part in (content_type or "").split(";")[1:]:
        name, _, value = part.strip().partition("=")
        if name.lower() == "charset" and value:
            return value.strip('"').strip("'")
    return "utf-8"


def decode_text(raw: RawResponse) -> str:
    try:
        return raw.content.decode(_charset(raw.header("Content-Type")), errors="replace")
    except LookupError:
        # Unknown charset label
        return raw.content.decode("utf-8", errors="replace")


def interpret_response(raw: RawResponse) -> Union[Success, FatalFailure]:
    """Classify one raw response and parse its body.

    204 is always a null success. JSON bodies (by declared content type) are
    parsed, anything else is returned as text. Statuses outside [200, 300)
    become an HttpError carrying the parsed body as ``details``.
    """
    headers = dict(raw.headers)
    if raw.status == NO_CONTENT:
        return Success(None, raw.status, raw.status_text, headers)

    ok = 200 <= raw.status < 300  # noqa: PLR2004
    text = decode_text(raw)
    value: Any = text
    if is_json_content_type(raw.header("Content-Type")):
        try:
            value = json.loads(text)
        except ValueError as e:
            if ok:
                return FatalFailure(
                    ParseError(
                        f"Invalid JSON in response body (HTTP {raw.status}): {e}",
                        body=text,
                        cause=e,
                    )
                )
            # Error bodies that lie about their type are still reported as text

    if ok:
        return Success(value, raw.status, raw.status_text, headers)
    return FatalFailure(HttpError(raw.status, raw.status_text, details=value, headers=headers))
