# ============================================================================
# mailbody/cli.py - CLI
# ============================================================================

import argparse
import json
import logging
from pathlib import Path

from . import create_body_parser
from .config import config


def main(argv=None) -> int:
    """Command line interface for the body parser."""
    parser = argparse.ArgumentParser(description="Extract text, html and verification codes from raw email")
    parser.add_argument("file", type=Path, help="Raw RFC 822 message file (.eml)")
    parser.add_argument("--log-level", type=str, default=config.DEFAULT_LOG_LEVEL,
                        choices=config.VALID_LOG_LEVELS,
                        help="Set logging level")
    parser.add_argument("--subject", type=str, default=None,
                        help="Subject to search for a code instead of the Subject header")
    parser.add_argument("--output", type=Path, help="Output JSON file")
    parser.add_argument("--code-only", action="store_true",
                        help="Print only the verification code")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Maximum MIME nesting depth to descend into")
    args = parser.parse_args(argv)

    # Set log level
    log_level = getattr(logging, args.log_level.upper())

    summarizer = create_body_parser(log_level=log_level, max_depth=args.max_depth)

    # Read and parse file
    try:
        data = args.file.read_bytes()
        summary = summarizer.summarize(data, subject=args.subject)

        if args.code_only:
            print(summary.verification_code)
            return 0

        result = summary.as_dict()
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                json.dump(result, f, indent=2, ensure_ascii=False)
            print(f"Results saved to: {args.output}")
        else:
            print(json.dumps(result, indent=2, ensure_ascii=False))

    except OSError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    import sys
    sys.exit(main())
