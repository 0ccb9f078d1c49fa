# ============================================================================
# mailbody/decoders.py - Transfer-encoding and charset decoding
# ============================================================================

import base64
import binascii
import codecs
import logging
import quopri
import re
from typing import Dict, Optional

from .headers import DEFAULT_CHARSET
from .interfaces import TransferDecoder
from .models import DecodeResult

_WHITESPACE_RE = re.compile(r'\s+')

UTF8_ALIASES = ("utf-8", "utf8", "us-ascii")


class Base64TransferDecoder(TransferDecoder):
    """Decoder for base64 bodies; line breaks and stray whitespace are ignored."""

    def decode(self, body: str) -> Optional[bytes]:
        cleaned = _WHITESPACE_RE.sub('', body)
        # Tolerate missing padding, which many senders omit
        cleaned += '=' * (-len(cleaned) % 4)
        try:
            return base64.b64decode(cleaned, validate=True)
        except (binascii.Error, ValueError):
            return None


class QuotedPrintableTransferDecoder(TransferDecoder):
    """Decoder for quoted-printable bodies (soft line breaks and =XX escapes)."""

    def decode(self, body: str) -> Optional[bytes]:
        return quopri.decodestring(body.encode('utf-8', errors='surrogateescape'))


class BodyDecoder:
    """Decodes entity bodies per Content-Transfer-Encoding, then per charset.

    Never raises: every failure degrades to a best-effort string and is
    reported through ``DecodeResult.fallback_used``.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.decoders: Dict[str, TransferDecoder] = {
            'base64': Base64TransferDecoder(),
            'quoted-printable': QuotedPrintableTransferDecoder(),
        }

    def decode(self, body: str, transfer_encoding: str = '', charset: str = DEFAULT_CHARSET) -> DecodeResult:
        if not body:
            return DecodeResult('')

        encoding = (transfer_encoding or '').strip().lower()
        decoder = self.decoders.get(encoding)
        if decoder is None:
            # 7bit, 8bit, binary or absent: the body is already text
            return DecodeResult(body, encoding=charset)

        data = decoder.decode(body)
        if data is None:
            self.logger.debug(f"Invalid {encoding} body ({len(body)} chars), keeping original text")
            return DecodeResult(body, fallback_used=True, encoding=charset)

        return self.decode_charset(data, charset)

    def decode_charset(self, data: bytes, charset: str = DEFAULT_CHARSET) -> DecodeResult:
        """Decode raw bytes with the declared charset, falling back to UTF-8."""
        charset = (charset or DEFAULT_CHARSET).strip().lower()
        encoding = 'utf-8' if charset in UTF8_ALIASES else charset
        fallback_used = False

        try:
            codecs.lookup(encoding)
        except LookupError:
            self.logger.debug(f"Unsupported charset '{charset}', falling back to utf-8")
            encoding = 'utf-8'
            fallback_used = True

        try:
            return DecodeResult(data.decode(encoding), fallback_used=fallback_used, encoding=encoding)
        except UnicodeDecodeError:
            self.logger.debug(f"Invalid {encoding} byte sequences, replacing them")
            return DecodeResult(data.decode(encoding, errors='replace'), fallback_used=True, encoding=encoding)
