# ============================================================================
# mailbody/__init__.py - Factory and DI setup
# ============================================================================

import logging
import sys
from typing import Optional

from .converters import HtmlToTextConverter, strip_html, text_to_html
from .decoders import BodyDecoder
from .models import ContentTypeInfo, DecodeResult, HeaderMap, MessageSummary, ParsedBody
from .parser import EntityParser, parse_email_body
from .summary import MessageSummarizer, summarize_message
from .verification import VerificationCodeExtractor, extract_verification_code

__all__ = [
    "ContentTypeInfo",
    "DecodeResult",
    "EntityParser",
    "HeaderMap",
    "MessageSummarizer",
    "MessageSummary",
    "ParsedBody",
    "VerificationCodeExtractor",
    "create_body_parser",
    "extract_verification_code",
    "parse_email_body",
    "strip_html",
    "summarize_message",
    "text_to_html",
]


def create_body_parser(
    log_level: int = logging.INFO, max_depth: Optional[int] = None, max_parts: Optional[int] = None
):
    """Factory function to create a fully configured MessageSummarizer."""
    # Setup logging
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger = logging.getLogger(__name__)

    # Create dependencies
    body_decoder = BodyDecoder(logger)
    entity_parser = EntityParser(logger, body_decoder, max_depth=max_depth, max_parts=max_parts)
    code_extractor = VerificationCodeExtractor(logger)
    html_converter = HtmlToTextConverter(logger)

    return MessageSummarizer(logger, entity_parser, code_extractor, html_converter)
