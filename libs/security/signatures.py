# libs/security/signatures.py
from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

import structlog

from libs.adapters.errors import SignatureHeaderError
from libs.contracts.job_models import SignatureHeader


@dataclass(frozen=True)
class SigningKeys:
    """Current + next HMAC key; next is only consulted while a rotation is in flight."""

    current: Optional[str] = None
    next: Optional[str] = None


def sign(key: str, timestamp: str, body: str | bytes) -> str:
    """base64(HMAC-SHA256(key, timestamp + body))"""
    raw = body if isinstance(body, bytes) else body.encode("utf-8")
    mac = hmac.new(key.encode("utf-8"), timestamp.encode("utf-8") + raw, hashlib.sha256)
    return base64.b64encode(mac.digest()).decode("ascii")


def build_signature_header(key: str, timestamp: str, body: str | bytes) -> str:
    return f"signature={sign(key, timestamp, body)},timestamp={timestamp}"


class SignatureVerifier:
    """
    Authenticates dispatch callbacks from the queue provider.

    - keys      : SigningKeys, injected (never read from a module-level global)
    - development: without any key, verification passes only in development mode;
                   in every other mode a missing key fails closed
    """

    def __init__(self, keys: SigningKeys, *, development: bool = False, logger=None) -> None:
        self.keys = keys
        self.development = development
        self.log = logger or structlog.get_logger()

    @property
    def is_configured(self) -> bool:
        return bool(self.keys.current)

    def verify(self, signature_header: Optional[str], raw_body: str | bytes) -> bool:
        if not self.is_configured:
            self.log.warning("signature.unconfigured", development=self.development)
            return self.development

        try:
            parsed = SignatureHeader.parse(signature_header)
        except (SignatureHeaderError, ValueError):
            self.log.info("signature.invalid", reason="malformed_header")
            return False

        if self._matches(parsed, raw_body, self.keys.current):
            return True
        # rotation window: current first, then next
        if self.keys.next and self._matches(parsed, raw_body, self.keys.next):
            self.log.info("signature.next_key_used")
            return True

        self.log.info("signature.invalid", reason="mismatch")
        return False

    @staticmethod
    def _matches(parsed: SignatureHeader, raw_body: str | bytes, key: str) -> bool:
        expected = sign(key, parsed.timestamp, raw_body)
        return hmac.compare_digest(expected.encode("ascii"), parsed.signature.encode("utf-8"))
