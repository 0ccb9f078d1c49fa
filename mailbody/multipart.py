# ============================================================================
# mailbody/multipart.py
# ============================================================================

import re
from typing import List

_LINE_BREAK_RE = re.compile(r'\r?\n')


def split_multipart(body: str, boundary: str) -> List[str]:
    """Split a multipart body into its raw sub-entities, in document order.

    Delimiter lines are compared after trimming, so trailing whitespace
    after ``--boundary`` is tolerated. The preamble, the epilogue and empty
    parts are dropped.
    """
    if not body or not boundary:
        return []

    delimiter = '--' + boundary
    terminator = delimiter + '--'
    parts: List[str] = []
    current: List[str] = []
    in_part = False

    for line in _LINE_BREAK_RE.split(body):
        marker = line.strip()
        if marker == delimiter:
            if in_part and current:
                parts.append('\n'.join(current))
            current = []
            in_part = True
            continue
        if marker == terminator:
            if in_part and current:
                parts.append('\n'.join(current))
            current = []
            break
        if in_part:
            current.append(line)

    # A missing terminator still yields the last part
    if in_part and current:
        parts.append('\n'.join(current))

    return parts
