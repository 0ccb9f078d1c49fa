"""
Centralized configuration for the mailbody parser
All tunable limits consolidated in one place, overridable from the environment
"""

import os
from typing import Any, Dict


class ParserConfig:
    """Configuration for the body parser with environment variable override support"""

    def __init__(self):
        # Recursion guards for nested multipart / message/rfc822 input
        self.MAX_DEPTH = int(os.getenv('MB_MAX_DEPTH', 20))
        self.MAX_PARTS = int(os.getenv('MB_MAX_PARTS', 500))

        # Message summary
        self.PREVIEW_CHARS = int(os.getenv('MB_PREVIEW_CHARS', 120))
        self.RAW_FALLBACK_CHARS = int(os.getenv('MB_RAW_FALLBACK_CHARS', 100000))

        # Logging
        self.VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
        self.DEFAULT_LOG_LEVEL = os.getenv('MB_DEFAULT_LOG_LEVEL', 'INFO').upper()

    def get_config_dict(self) -> Dict[str, Any]:
        """Get all configuration values as a dictionary"""
        return {
            'max_depth': self.MAX_DEPTH,
            'max_parts': self.MAX_PARTS,
            'preview_chars': self.PREVIEW_CHARS,
            'raw_fallback_chars': self.RAW_FALLBACK_CHARS,
            'valid_log_levels': self.VALID_LOG_LEVELS,
            'default_log_level': self.DEFAULT_LOG_LEVEL,
        }


# Create a singleton instance
config = ParserConfig()
