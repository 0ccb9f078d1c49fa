# ============================================================================
# mailbody/headers.py - Header block splitting and parsing
# ============================================================================

import re
from typing import Tuple

from .models import ContentTypeInfo, HeaderMap

_LINE_BREAK_RE = re.compile(r'\r?\n')
_HEADER_LINE_RE = re.compile(r'^([^:]+):\s*(.*)$')
# Boundary tokens are case-sensitive (RFC 2046); only the parameter name is not.
_BOUNDARY_RE = re.compile(r'boundary\s*=\s*"?([^";\r\n]+)"?', re.IGNORECASE)
_CHARSET_RE = re.compile(r'charset\s*=\s*"?([^";]+)', re.IGNORECASE)

DEFAULT_CHARSET = "utf-8"


def split_headers_and_body(raw: str) -> Tuple[HeaderMap, str]:
    """Split one entity at its first blank line.

    CRLF separators are looked for first, then bare LF. Without any
    separator the whole input is the body and the header map is empty.
    """
    idx = raw.find("\r\n\r\n")
    sep_len = 4
    if idx == -1:
        idx = raw.find("\n\n")
        sep_len = 2
    if idx == -1:
        return HeaderMap(), raw
    return parse_headers(raw[:idx]), raw[idx + sep_len:]


def parse_headers(raw_headers: str) -> HeaderMap:
    """Parse a raw header block, unfolding continuation lines."""
    headers = {}
    last_key = ""
    for line in _LINE_BREAK_RE.split(raw_headers):
        if line[:1].isspace() and last_key:
            headers[last_key] += " " + line.strip()
            continue
        match = _HEADER_LINE_RE.match(line)
        if match:
            last_key = match.group(1).lower()
            headers[last_key] = match.group(2)
    return HeaderMap(headers)


def get_boundary(content_type: str) -> str:
    if not content_type:
        return ""
    match = _BOUNDARY_RE.search(content_type)
    return match.group(1).strip() if match else ""


def get_charset(content_type: str) -> str:
    match = _CHARSET_RE.search(content_type or "")
    charset = match.group(1).strip().lower() if match else ""
    if not charset or charset == "us-ascii":
        return DEFAULT_CHARSET
    return charset


def resolve_content_type(content_type: str) -> ContentTypeInfo:
    """Extract the boundary and charset parameters of a Content-Type value."""
    return ContentTypeInfo(
        boundary=get_boundary(content_type),
        charset=get_charset(content_type),
    )
