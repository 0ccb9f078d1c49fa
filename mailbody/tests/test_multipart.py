from mailbody.multipart import split_multipart


def test_split_drops_preamble_and_epilogue():
    body = (
        "This is a multi-part message in MIME format.\r\n"
        "--sep\r\n"
        "Content-Type: text/plain\r\n"
        "\r\n"
        "first\r\n"
        "--sep\r\n"
        "Content-Type: text/html\r\n"
        "\r\n"
        "<p>second</p>\r\n"
        "--sep--\r\n"
        "epilogue text\r\n"
    )
    parts = split_multipart(body, "sep")
    assert parts == [
        "Content-Type: text/plain\n\nfirst",
        "Content-Type: text/html\n\n<p>second</p>",
    ]


def test_boundary_lines_tolerate_trailing_whitespace():
    body = "--sep   \nA: 1\n\none\n--sep\t\nA: 2\n\ntwo\n--sep--  \n"
    assert split_multipart(body, "sep") == ["A: 1\n\none", "A: 2\n\ntwo"]


def test_unterminated_last_part_is_kept():
    body = "--sep\nA: 1\n\none\n--sep\nA: 2\n\ntwo"
    assert split_multipart(body, "sep") == ["A: 1\n\none", "A: 2\n\ntwo"]


def test_boundary_is_case_sensitive():
    body = "--abc\nA: 1\n\none\n--abc--\n"
    assert split_multipart(body, "ABC") == []


def test_no_markers_yields_no_parts():
    assert split_multipart("plain text only", "sep") == []
    assert split_multipart("", "sep") == []
    assert split_multipart("--sep\nx", "") == []
