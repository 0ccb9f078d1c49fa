# ============================================================================
# mailbody/verification.py - One-time code extraction
# ============================================================================
"""
Locate a 4-8 digit verification code in a message.

A number is only accepted when one of the keywords below sits close to it,
either before or after. Matching is attempted in a fixed order: subject
first, then the body with a tight window, then the body with a wide window
guarded by false-positive filters. There is no keyword-free fallback, so
phone numbers, dates and reference IDs on their own never come back as codes.
"""

import logging
import re
from typing import Iterable, Optional, Tuple

from .converters import strip_html

MIN_CODE_LENGTH = 4
MAX_CODE_LENGTH = 8

SUBJECT_WINDOW = 20
BODY_WINDOW = 30
LOOSE_BODY_WINDOW = 80

KEYWORDS = (
    r'(?:verification|one[-\s]?time|two[-\s]?factor|2fa|security|auth|login|confirm|code|otp'
    r'|验证码|校验码|驗證碼|確認碼|認證碼|認証コード|인증코드|코드)'
)
# \s also covers NBSP
SEPARATOR = r"[\s\-–—_.·•∙‧'’]"
CODE = rf'((?<![0-9])[0-9](?:{SEPARATOR}?[0-9]){{{MIN_CODE_LENGTH - 1},{MAX_CODE_LENGTH - 1}}}(?![0-9]))'

_NON_DIGIT_RE = re.compile(r'[^0-9]+')
_POSTAL_WORDS = ('address', 'street', 'zip', 'postal')
_STATE_ZIP_RE = re.compile(r'\b[A-Z]{2}\s+[0-9]{5}\b')


def _proximity_patterns(window: int) -> Tuple[re.Pattern, re.Pattern]:
    gap = rf'[^\n\r0-9]{{0,{window}}}'
    return (
        re.compile(KEYWORDS + gap + CODE, re.IGNORECASE),
        re.compile(CODE + gap + KEYWORDS, re.IGNORECASE),
    )


SUBJECT_PATTERNS = _proximity_patterns(SUBJECT_WINDOW)
BODY_PATTERNS = _proximity_patterns(BODY_WINDOW)
LOOSE_BODY_PATTERNS = _proximity_patterns(LOOSE_BODY_WINDOW)


def normalize_digits(value: str) -> str:
    digits = _NON_DIGIT_RE.sub('', value or '')
    if MIN_CODE_LENGTH <= len(digits) <= MAX_CODE_LENGTH:
        return digits
    return ''


def is_likely_non_code(digits: str, context: str = '') -> bool:
    """Reject years, postal codes and street numbers found by the loose search."""
    if not digits:
        return True

    if len(digits) == 4 and 2000 <= int(digits) <= 2099:
        return True

    if len(digits) == 5:
        lower_context = context.lower()
        if any(word in lower_context for word in _POSTAL_WORDS):
            return True
        if _STATE_ZIP_RE.search(context):
            return True

    # "1000 Sofia": a street number followed by a capitalized place name
    if re.search(rf'\b{digits}\s+[A-Z][a-z]+', context):
        return True

    return False


class VerificationCodeExtractor:
    """Finds keyword-anchored verification codes in subject, text and html."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def extract(self, subject: Optional[str] = '', text: Optional[str] = '', html: Optional[str] = '') -> str:
        subject_space = str(subject or '')
        body_space = f"{text or ''} {strip_html(html)}".strip()

        code = self._first_match(SUBJECT_PATTERNS, subject_space)
        if code:
            self.logger.debug(f"Verification code found in subject: {code}")
            return code

        code = self._first_match(BODY_PATTERNS, body_space)
        if code:
            self.logger.debug(f"Verification code found in body: {code}")
            return code

        # Only the first match per direction is considered
        for pattern in LOOSE_BODY_PATTERNS:
            match = pattern.search(body_space)
            if not match:
                continue
            digits = normalize_digits(match.group(1))
            if digits and not is_likely_non_code(digits, body_space):
                self.logger.debug(f"Verification code found by loose body search: {digits}")
                return digits
            self.logger.debug(f"Rejected loose candidate {match.group(1)!r}")

        return ''

    def _first_match(self, patterns: Iterable[re.Pattern], space: str) -> str:
        if not space:
            return ''
        for pattern in patterns:
            match = pattern.search(space)
            if match:
                digits = normalize_digits(match.group(1))
                if digits:
                    return digits
        return ''


_default_extractor: Optional[VerificationCodeExtractor] = None


def extract_verification_code(subject: Optional[str] = '', text: Optional[str] = '', html: Optional[str] = '') -> str:
    """Return the verification code found in the message, or an empty string."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = VerificationCodeExtractor(logging.getLogger(__name__))
    return _default_extractor.extract(subject, text, html)
