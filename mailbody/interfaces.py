# ============================================================================
# mailbody/interfaces.py
# ============================================================================

from abc import ABC, abstractmethod
from typing import Optional


class TransferDecoder(ABC):
    """Interface for Content-Transfer-Encoding decoders."""

    @abstractmethod
    def decode(self, body: str) -> Optional[bytes]:
        """Decode the body to raw bytes. Returns None when the body is not valid for this encoding."""
        pass
