# ============================================================================
# mailbody/models.py
# ============================================================================

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping


class HeaderMap(Mapping[str, str]):
    """Headers of a single MIME entity, keyed by lowercased name.

    Lookups are case-insensitive and ``get`` returns an empty string for a
    missing header, so callers never have to special-case absent values.
    """

    def __init__(self, values: Mapping[str, str] = None):
        self._values: Dict[str, str] = {}
        for name, value in (values or {}).items():
            self._values[name.lower()] = value

    def __getitem__(self, name: str) -> str:
        return self._values[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"HeaderMap({self._values!r})"

    def get(self, name: str, default: str = "") -> str:
        return self._values.get(name.lower(), default)


@dataclass(frozen=True)
class ContentTypeInfo:
    boundary: str = ""
    charset: str = "utf-8"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one decode step.

    ``fallback_used`` is True when the step could not do what the headers
    asked for (invalid base64, unknown charset, undecodable bytes) and
    returned a best-effort value instead.
    """

    text: str
    fallback_used: bool = False
    encoding: str = "utf-8"


@dataclass
class ParsedBody:
    text: str = ""
    html: str = ""
    truncated: bool = False

    def as_dict(self) -> Dict[str, str]:
        return {"text": self.text, "html": self.html}


@dataclass
class MessageSummary:
    subject: str
    sender: str
    sender_address: str
    text: str
    html: str
    preview: str
    verification_code: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "subject": self.subject,
            "sender": self.sender,
            "sender_address": self.sender_address,
            "preview": self.preview,
            "verification_code": self.verification_code,
            "text": self.text,
            "html": self.html,
        }
