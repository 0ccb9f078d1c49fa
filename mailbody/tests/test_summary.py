import base64
import json
import logging

from mailbody import create_body_parser
from mailbody.cli import main
from mailbody.config import ParserConfig
from mailbody.summary import decode_header_value, extract_address, summarize_message


def _encoded(text):
    return "=?utf-8?B?" + base64.b64encode(text.encode("utf-8")).decode("ascii") + "?="


def test_summary_of_plain_message():
    raw = (
        f"Subject: {_encoded('Ваш код')}\r\n"
        "From: Acme <NoReply@Acme.com>\r\n"
        "Content-Type: text/plain; charset=utf-8\r\n"
        "\r\n"
        "Your code is 904512\r\n"
    )
    summary = summarize_message(raw, logging.getLogger("test"))
    assert summary.subject == "Ваш код"
    assert summary.sender == "Acme <NoReply@Acme.com>"
    assert summary.sender_address == "noreply@acme.com"
    assert summary.verification_code == "904512"
    assert summary.preview == "Your code is 904512"


def test_summary_uses_subject_code():
    raw = "Subject: Your login code 5567\r\nContent-Type: text/plain\r\n\r\nhello"
    assert summarize_message(raw).verification_code == "5567"


def test_preview_from_html_only_message():
    raw = (
        "Content-Type: text/html; charset=utf-8\r\n"
        "\r\n"
        "<html><body><p>Hello <b>there</b></p></body></html>"
    )
    summary = summarize_message(raw)
    assert summary.text == ""
    assert summary.preview == "Hello there"


def test_raw_fallback_when_nothing_parsed():
    raw = "Content-Type: multipart/mixed; boundary=zzz\r\n\r\nplain stuff"
    summary = summarize_message(raw)
    assert summary.html == ""
    assert summary.text == raw


def test_preview_is_collapsed_and_truncated():
    raw = "Content-Type: text/plain\r\n\r\n" + "word   \r\n" * 100
    summary = summarize_message(raw)
    assert len(summary.preview) == 120
    assert "  " not in summary.preview


def test_summary_as_dict_keys():
    summary = create_body_parser(log_level=logging.WARNING).summarize(b"Subject: hi\r\n\r\nbody")
    assert set(summary.as_dict()) == {
        "subject", "sender", "sender_address", "preview", "verification_code", "text", "html",
    }


def test_decode_header_value():
    assert decode_header_value(None) == ""
    assert decode_header_value("plain subject") == "plain subject"
    assert decode_header_value(_encoded("验证码")) == "验证码"


def test_extract_address():
    assert extract_address("Bob <Bob@Example.org>") == "bob@example.org"
    assert extract_address("no address here") == ""


def test_config_env_override(monkeypatch):
    monkeypatch.setenv("MB_MAX_DEPTH", "3")
    monkeypatch.setenv("MB_PREVIEW_CHARS", "40")
    cfg = ParserConfig()
    assert cfg.MAX_DEPTH == 3
    assert cfg.get_config_dict()["preview_chars"] == 40


def test_cli_code_only(tmp_path, capsys):
    path = tmp_path / "message.eml"
    path.write_bytes(b"Subject: sign in\r\nContent-Type: text/plain\r\n\r\nYour code is 482913\r\n")
    assert main([str(path), "--code-only", "--log-level", "ERROR"]) == 0
    out = capsys.readouterr().out
    assert out.strip().splitlines()[-1] == "482913"


def test_cli_writes_json(tmp_path):
    path = tmp_path / "message.eml"
    path.write_bytes(b"Subject: hello\r\n\r\nno code here")
    output = tmp_path / "out.json"
    assert main([str(path), "--output", str(output), "--log-level", "ERROR"]) == 0
    result = json.loads(output.read_text(encoding="utf-8"))
    assert result["subject"] == "hello"
    assert result["verification_code"] == ""
    assert result["text"] == "no code here"


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.eml"), "--log-level", "ERROR"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_subject_override_is_used_for_code_only():
    raw = "Subject: Welcome\r\nContent-Type: text/plain\r\n\r\nhello there"
    summary = summarize_message(raw, subject="Your login code 5567")
    assert summary.verification_code == "5567"
    assert summary.subject == "Welcome"
    assert summarize_message(raw).verification_code == ""


def test_cli_subject_option(tmp_path, capsys):
    path = tmp_path / "message.eml"
    path.write_bytes(b"Subject: Welcome\r\nContent-Type: text/plain\r\n\r\nhello there\r\n")
    assert main([str(path), "--subject", "Your login code 5567", "--code-only", "--log-level", "ERROR"]) == 0
    out = capsys.readouterr().out
    assert out.strip().splitlines()[-1] == "5567"
