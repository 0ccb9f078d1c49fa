from mailbody.headers import (
    get_boundary,
    get_charset,
    parse_headers,
    resolve_content_type,
    split_headers_and_body,
)
from mailbody.models import ContentTypeInfo, HeaderMap


def test_split_crlf():
    headers, body = split_headers_and_body("Subject: hi\r\nX-Test: 1\r\n\r\nbody\r\nmore")
    assert headers.get("subject") == "hi"
    assert headers.get("x-test") == "1"
    assert body == "body\r\nmore"


def test_split_lf():
    headers, body = split_headers_and_body("Subject: hi\n\nline one\n\nline two")
    assert headers.get("subject") == "hi"
    assert body == "line one\n\nline two"


def test_split_prefers_crlf_separator():
    headers, body = split_headers_and_body("A: 1\n\nB\r\n\r\nC")
    assert headers.get("a") == "1"
    assert body == "C"


def test_split_without_separator_is_all_body():
    headers, body = split_headers_and_body("just some text")
    assert len(headers) == 0
    assert body == "just some text"


def test_parse_headers_unfolds_continuations():
    headers = parse_headers(
        'Content-Type: multipart/mixed;\r\n\tboundary="abc"\r\nSubject: first\r\n  second'
    )
    assert headers.get("content-type") == 'multipart/mixed; boundary="abc"'
    assert headers.get("subject") == "first second"


def test_parse_headers_skips_malformed_lines():
    headers = parse_headers("not a header\nFrom: a@b.c\n   orphan? no, continuation")
    assert list(headers) == ["from"]
    assert headers.get("from") == "a@b.c orphan? no, continuation"


def test_leading_continuation_without_header_is_ignored():
    headers = parse_headers("  dangling\nTo: x@y.z")
    assert dict(headers) == {"to": "x@y.z"}


def test_header_map_case_insensitive_and_missing_is_empty():
    headers = HeaderMap({"Content-Type": "text/plain"})
    assert headers["CONTENT-TYPE"] == "text/plain"
    assert headers.get("Content-Transfer-Encoding") == ""


def test_boundary_preserves_case():
    assert get_boundary('multipart/alternative; BOUNDARY="AbC123"') == "AbC123"
    assert get_boundary("multipart/mixed; boundary=XyZ; charset=utf-8") == "XyZ"
    assert get_boundary("text/plain") == ""
    assert get_boundary("") == ""


def test_charset_defaults():
    assert get_charset("text/plain") == "utf-8"
    assert get_charset("text/plain; charset=us-ascii") == "utf-8"
    assert get_charset('text/plain; charset="ISO-8859-1"') == "iso-8859-1"
    assert get_charset("") == "utf-8"


def test_resolve_content_type():
    info = resolve_content_type('multipart/related; boundary="----=_Part_1"; charset=GBK')
    assert info == ContentTypeInfo(boundary="----=_Part_1", charset="gbk")
    assert resolve_content_type("") == ContentTypeInfo()
