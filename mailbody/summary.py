from __future__ import annotations

import logging
import re
from email.errors import HeaderParseError
from email.header import decode_header
from email.utils import getaddresses
from typing import Optional, Union

from .config import config
from .converters import HtmlToTextConverter
from .headers import split_headers_and_body
from .models import MessageSummary
from .parser import EntityParser
from .verification import VerificationCodeExtractor

_WHITESPACE_RE = re.compile(r'\s+')


def decode_header_value(value: Optional[str]) -> str:
    """Decode RFC 2047 encoded-words (``=?utf-8?B?...?=``) in a header value."""
    if not value:
        return ''
    try:
        parts = decode_header(value)
    except HeaderParseError:
        return value
    out = []
    for fragment, enc in parts:
        if isinstance(fragment, bytes):
            try:
                out.append(fragment.decode(enc or 'utf-8', errors='replace'))
            except LookupError:
                out.append(fragment.decode('utf-8', errors='replace'))
        else:
            out.append(fragment)
    return ''.join(out).strip()


def extract_address(value: str) -> str:
    parsed = getaddresses([value or ''])
    for _name, addr in parsed:
        addr = (addr or '').strip().lower()
        if '@' in addr:
            return addr
    return ''


class MessageSummarizer:
    """Builds the per-message digest stored alongside an inbound message."""

    def __init__(
        self,
        logger: logging.Logger,
        entity_parser: EntityParser,
        code_extractor: VerificationCodeExtractor,
        html_converter: HtmlToTextConverter,
    ) -> None:
        self.logger = logger
        self.entity_parser = entity_parser
        self.code_extractor = code_extractor
        self.html_converter = html_converter

    def summarize(self, raw: Union[str, bytes, None], subject: Optional[str] = None) -> MessageSummary:
        """Summarize a raw message; ``subject`` overrides the Subject header for code extraction."""
        if isinstance(raw, (bytes, bytearray)):
            raw = self.entity_parser.decode_raw(bytes(raw))
        raw = raw or ''

        headers, _body = split_headers_and_body(raw)
        header_subject = decode_header_value(headers.get('subject'))
        sender = decode_header_value(headers.get('from'))

        parsed = self.entity_parser.parse(raw)
        text, html = parsed.text, parsed.html
        if not text and not html:
            text = raw[:config.RAW_FALLBACK_CHARS]

        code = self.code_extractor.extract(header_subject if subject is None else subject, text, html)
        summary = MessageSummary(
            subject=header_subject,
            sender=sender,
            sender_address=extract_address(sender),
            text=text,
            html=html,
            preview=self.build_preview(text, html),
            verification_code=code,
        )
        self.logger.info(
            f"Summarized message: subject={header_subject[:40]!r}, code={'yes' if code else 'no'}, "
            f"text={len(text)} chars, html={len(html)} chars"
        )
        return summary

    def build_preview(self, text: str, html: str) -> str:
        plain = text if text and text.strip() else self.html_converter.convert(html)
        return _WHITESPACE_RE.sub(' ', plain or '').strip()[:config.PREVIEW_CHARS]


def summarize_message(
    raw: Union[str, bytes, None],
    logger: Optional[logging.Logger] = None,
    subject: Optional[str] = None,
) -> MessageSummary:
    logger = logger or logging.getLogger(__name__)
    summarizer = MessageSummarizer(
        logger,
        EntityParser(logger),
        VerificationCodeExtractor(logger),
        HtmlToTextConverter(logger),
    )
    return summarizer.summarize(raw, subject=subject)
