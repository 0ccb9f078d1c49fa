from __future__ import annotations

import logging
import re
from typing import Optional, Union

import chardet

from .config import config
from .converters import guess_html_from_raw, text_to_html
from .decoders import BodyDecoder
from .headers import get_boundary, get_charset, split_headers_and_body
from .models import HeaderMap, ParsedBody
from .multipart import split_multipart

_OPEN_TAG_RE = re.compile(r"<\w+")
_CLOSE_TAG_RE = re.compile(r"</\w+>")


class EntityParser:
    """Recursive MIME entity parser producing ``{text, html}``.

    Nesting depth and the total number of sub-entities visited per message
    are bounded; entities past either limit are read as plain text.
    """

    def __init__(
        self,
        logger: logging.Logger,
        body_decoder: Optional[BodyDecoder] = None,
        max_depth: Optional[int] = None,
        max_parts: Optional[int] = None,
    ) -> None:
        self.logger = logger
        self.body_decoder = body_decoder or BodyDecoder(logger)
        self.max_depth = config.MAX_DEPTH if max_depth is None else max_depth
        self.max_parts = config.MAX_PARTS if max_parts is None else max_parts

    # ------------------------------------------------------------------
    def parse(self, raw: Union[str, bytes, None]) -> ParsedBody:
        """Parse a full RFC 822 message (or a bare body) into text and html."""
        if not raw:
            return ParsedBody()
        if isinstance(raw, (bytes, bytearray)):
            raw = self.decode_raw(bytes(raw))

        state = _ParseState()
        result = self._parse_message(raw, 0, state)
        if not result.html and result.text:
            result.html = text_to_html(result.text)
        result.truncated = state.truncated
        self.logger.debug(
            f"Parsed message: {state.parts} parts, text={len(result.text)} chars, "
            f"html={len(result.html)} chars, truncated={result.truncated}"
        )
        return result

    # ------------------------------------------------------------------
    def parse_entity(self, headers: HeaderMap, body: str, depth: int = 0) -> ParsedBody:
        return self._parse_entity(headers, body, depth, _ParseState())

    # ------------------------------------------------------------------
    def decode_raw(self, data: bytes) -> str:
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError:
            pass
        detected = chardet.detect(data)
        encoding = detected.get('encoding')
        self.logger.debug(f"Raw message is not utf-8, chardet guessed {encoding} ({detected.get('confidence')})")
        if encoding:
            try:
                return data.decode(encoding, errors='replace')
            except LookupError:
                pass
        return data.decode('utf-8', errors='replace')

    # ------------------------------------------------------------------
    def _parse_message(self, raw: str, depth: int, state: _ParseState) -> ParsedBody:
        headers, body = split_headers_and_body(raw)
        return self._parse_entity(headers, body, depth, state)

    # ------------------------------------------------------------------
    def _parse_entity(self, headers: HeaderMap, body: str, depth: int, state: _ParseState) -> ParsedBody:
        # Boundary values are case-sensitive, so keep the raw header for them
        ct_raw = headers.get('content-type')
        ct = ct_raw.lower()
        transfer_encoding = headers.get('content-transfer-encoding').lower()

        if not ct.startswith('multipart/'):
            return self._parse_leaf(ct, transfer_encoding, body)

        if depth >= self.max_depth or state.parts >= self.max_parts:
            self.logger.warning(
                f"MIME nesting limit reached (depth={depth}, parts={state.parts}), reading entity as plain text"
            )
            state.truncated = True
            return self._parse_leaf('text/plain', transfer_encoding, body)

        text = ''
        html = ''
        boundary = get_boundary(ct_raw)
        if boundary:
            for part in split_multipart(body, boundary):
                if state.parts >= self.max_parts:
                    self.logger.warning(f"Part limit of {self.max_parts} reached, skipping remaining parts")
                    state.truncated = True
                    break
                state.parts += 1

                part_headers, part_body = split_headers_and_body(part)
                part_ct = part_headers.get('content-type').lower()

                if part_ct.startswith('message/rfc822'):
                    self.logger.debug(f"Descending into message/rfc822 part at depth {depth + 1}")
                    nested = self._parse_message(part_body, depth + 1, state)
                elif 'rfc822-headers' in part_ct:
                    # Headers of a referenced message only; the body follows in a later part
                    continue
                else:
                    nested = self._parse_entity(part_headers, part_body, depth + 1, state)

                if not html and nested.html:
                    html = nested.html
                if not text and nested.text:
                    text = nested.text
                if text and html:
                    break
        else:
            self.logger.debug(f"Multipart entity without boundary: {ct_raw!r}")

        if not html:
            html = guess_html_from_raw(body)
            if not html and _looks_like_markup(body):
                html = body

        if not html and text:
            html = text_to_html(text)

        return ParsedBody(text=text, html=html)

    # ------------------------------------------------------------------
    def _parse_leaf(self, ct: str, transfer_encoding: str, body: str) -> ParsedBody:
        result = self.body_decoder.decode(body, transfer_encoding, get_charset(ct))
        decoded = result.text
        if result.fallback_used:
            self.logger.debug(f"Best-effort decode for {ct or 'untyped'} entity ({transfer_encoding or '7bit'}, {result.encoding})")

        if 'text/html' in ct:
            return ParsedBody(html=decoded)

        if not ct:
            guessed = guess_html_from_raw(decoded or body or '')
            if guessed:
                return ParsedBody(html=guessed)

        return ParsedBody(text=decoded)


def _looks_like_markup(body: str) -> bool:
    """True when an opening tag is followed somewhere by a closing tag."""
    if not body:
        return False
    match = _OPEN_TAG_RE.search(body)
    if not match:
        return False
    end = body.find('>', match.end())
    return end != -1 and _CLOSE_TAG_RE.search(body, end + 1) is not None


class _ParseState:
    """Counters shared across one top-level parse call."""

    __slots__ = ('parts', 'truncated')

    def __init__(self) -> None:
        self.parts = 0
        self.truncated = False


_default_parser: Optional[EntityParser] = None


def parse_email_body(raw: Union[str, bytes, None]) -> ParsedBody:
    """Parse a raw message into ``ParsedBody(text, html)`` with default settings."""
    global _default_parser
    if _default_parser is None:
        _default_parser = EntityParser(logging.getLogger(__name__))
    return _default_parser.parse(raw)
