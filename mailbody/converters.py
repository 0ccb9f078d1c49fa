# ============================================================================
# mailbody/converters.py - HTML <-> text helpers
# ============================================================================

import html
import logging
import re
import unicodedata

import html2text

_SCRIPT_RE = re.compile(r'<script[\s\S]*?</script>', re.IGNORECASE)
_STYLE_RE = re.compile(r'<style[\s\S]*?</style>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')
_WHITESPACE_RE = re.compile(r'\s+')

# Invisible characters that html2text leaves behind from layout-heavy mail
UNICODE_CLEANUP_MAP = {
    '\u034f': '',      # Combining Grapheme Joiner
    '\u200b': '',      # Zero Width Space
    '\u200c': '',      # Zero Width Non-Joiner
    '\u200d': '',      # Zero Width Joiner
    '\u200e': '',      # Left-to-Right Mark
    '\u200f': '',      # Right-to-Left Mark
    '\u2060': '',      # Word Joiner
    '\ufeff': '',      # BOM
    '\u00ad': '',      # Soft Hyphen
    '\u00a0': ' ',     # Non-Breaking Space
    '\u2007': ' ',     # Figure Space
    '\u2009': ' ',     # Thin Space
    '\u202f': ' ',     # Narrow No-Break Space
}


def strip_html(html_content: str) -> str:
    """Reduce HTML to a single line of plain text for pattern matching."""
    text = str(html_content or '')
    text = _SCRIPT_RE.sub(' ', text)
    text = _STYLE_RE.sub(' ', text)
    text = _TAG_RE.sub(' ', text)
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(' ', text).strip()


def escape_html(text: str) -> str:
    return html.escape(text, quote=True).replace('&#x27;', '&#39;')


def text_to_html(text: str) -> str:
    """Wrap plain text so it renders with its line breaks intact."""
    return f'<div style="white-space:pre-wrap">{escape_html(text)}</div>'


def guess_html_from_raw(raw: str) -> str:
    """Pull an ``<html>...</html>`` document out of arbitrary text.

    The span runs from the first ``<html`` (or ``<!doctype html``) to the
    last ``</html>``; both searches ignore case.
    """
    if not raw:
        return ''
    lower = raw.lower()
    start = lower.find('<html')
    if start == -1:
        start = lower.find('<!doctype html')
    if start == -1:
        return ''
    end = lower.rfind('</html>')
    if end == -1:
        return ''
    return raw[start:end + len('</html>')]


class HtmlToTextConverter:
    """Converts HTML content to readable plain text with Unicode cleanup."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def convert(self, html_content: str) -> str:
        if not html_content:
            return ''

        self.logger.debug(f"Converting HTML to text, input length: {len(html_content)}")
        h = html2text.HTML2Text()
        h.ignore_links = True
        h.ignore_images = True
        h.ignore_emphasis = True
        h.body_width = 0
        h.unicode_snob = True
        result = h.handle(html_content).strip()
        return self._clean_unicode_control_characters(result)

    def _clean_unicode_control_characters(self, text: str) -> str:
        removed_chars = []
        for unicode_char, replacement in UNICODE_CLEANUP_MAP.items():
            count = text.count(unicode_char)
            if count:
                text = text.replace(unicode_char, replacement)
                char_name = unicodedata.name(unicode_char, f'U+{ord(unicode_char):04X}')
                removed_chars.append(f"{char_name} ({count}x)")

        if removed_chars:
            self.logger.debug(f"Cleaned Unicode control characters: {', '.join(removed_chars)}")

        text = re.sub(r'\n{3,}', '\n\n', text)
        return text.strip()
