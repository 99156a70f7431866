from __future__ import annotations

import re
from typing import Any

from pydantic import HttpUrl, TypeAdapter, ValidationError

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]+")
_WHITESPACE_RE = re.compile(r"\s+")

_HTTP_URL = TypeAdapter(HttpUrl)


def sanitize_text(value: Any) -> str:
    """
    Reduce an untrusted scalar to a single line of plain text.

    Markup tags and control characters are removed, whitespace runs collapse to
    one space. Anything that is not a string or number becomes "".
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""

    text = _TAG_RE.sub("", str(value))
    text = _CONTROL_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_url(value: Any) -> str:
    """Return the sanitized URL if it is an absolute http(s) URL, else ""."""
    text = sanitize_text(value)
    if not text or " " in text:
        return ""

    try:
        _HTTP_URL.validate_python(text)
    except ValidationError:
        return ""
    return text
