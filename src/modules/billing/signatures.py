"""Webhook signature verification.

Both verifiers fail closed: a missing header, a malformed header, an
undecodable secret or a stale timestamp all yield ``False`` and nothing else,
so a caller cannot tell which check rejected the delivery.
"""

import base64
import binascii
import hashlib
import hmac
import time
from abc import ABC, abstractmethod
from typing import Callable, Mapping

from src.api.core.constants import (
    PADDLE_SIGNATURE_HEADER,
    WEBHOOK_ID_HEADER,
    WEBHOOK_SIGNATURE_HEADER,
    WEBHOOK_TIMESTAMP_HEADER,
)
from src.modules.billing.constants import (
    WEBHOOK_SECRET_PREFIXES,
    WEBHOOK_SIGNATURE_VERSION,
)


def _pad_base64(value: str) -> str:
    core = value.rstrip("=")
    return core + "=" * (-len(core) % 4)


def _strip_secret_prefix(secret: str) -> str:
    for prefix in WEBHOOK_SECRET_PREFIXES:
        if secret.startswith(prefix):
            return secret[len(prefix) :]
    return secret


def secret_key_candidates(secret: str) -> list[bytes]:
    """HMAC keys to try for a shared secret, in a fixed order.

    Providers and environments disagree on whether the secret is base64
    (padded or not, standard or URL-safe alphabet) or raw text, so each
    reading is attempted in turn.
    """
    stripped = _strip_secret_prefix(secret)
    decoders: list[Callable[[str], bytes]] = [
        lambda s: base64.b64decode(_pad_base64(s), validate=True),
        lambda s: base64.urlsafe_b64decode(_pad_base64(s)),
        lambda s: s.encode("utf-8"),
    ]

    candidates: list[bytes] = []
    for decode in decoders:
        try:
            key = decode(stripped)
        except (binascii.Error, ValueError):
            continue
        if key and key not in candidates:
            candidates.append(key)

    raw = secret.encode("utf-8")
    if raw and raw not in candidates:
        candidates.append(raw)

    return candidates


class SignatureVerifier(ABC):
    """Authenticates a raw webhook body and its headers against a secret."""

    def __init__(
        self, tolerance_seconds: int = 0, clock: Callable[[], float] = time.time
    ):
        self.tolerance_seconds = tolerance_seconds
        self.clock = clock

    def verify(self, raw_body: bytes, headers: Mapping[str, str], secret: str) -> bool:
        if not secret:
            return False
        try:
            return self._verify(raw_body, headers, secret)
        except (ValueError, TypeError, UnicodeError, binascii.Error):
            return False

    @abstractmethod
    def _verify(
        self, raw_body: bytes, headers: Mapping[str, str], secret: str
    ) -> bool: ...

    def _timestamp_is_fresh(self, timestamp: str) -> bool:
        if self.tolerance_seconds <= 0:
            return True
        return abs(self.clock() - int(timestamp)) <= self.tolerance_seconds


class StandardWebhookVerifier(SignatureVerifier):
    """Standard Webhooks scheme used by Polar.

    Signed content is ``"{webhook-id}.{webhook-timestamp}.{body}"`` and the
    ``webhook-signature`` header holds space separated ``v1,<digest>`` tokens.
    Digests are accepted base64 or hex encoded.
    """

    def _verify(self, raw_body: bytes, headers: Mapping[str, str], secret: str) -> bool:
        msg_id = headers.get(WEBHOOK_ID_HEADER)
        timestamp = headers.get(WEBHOOK_TIMESTAMP_HEADER)
        signature = headers.get(WEBHOOK_SIGNATURE_HEADER)

        if not msg_id or not timestamp or not signature:
            return False
        if not self._timestamp_is_fresh(timestamp):
            return False

        candidates = []
        for token in signature.split():
            version, _, digest = token.partition(",")
            if version == WEBHOOK_SIGNATURE_VERSION and digest:
                candidates.append(digest.encode("utf-8"))
        if not candidates:
            return False

        signed_content = f"{msg_id}.{timestamp}.".encode("utf-8") + raw_body

        for key in secret_key_candidates(secret):
            mac = hmac.new(key, signed_content, hashlib.sha256).digest()
            expected = (base64.b64encode(mac), mac.hex().encode("ascii"))

            matched = False
            for candidate in candidates:
                for encoded in expected:
                    matched |= hmac.compare_digest(encoded, candidate)
            if matched:
                return True

        return False


class PaddleSignatureVerifier(SignatureVerifier):
    """Paddle Billing scheme: ``paddle-signature: ts=<unix>;h1=<hex>``.

    Several ``h1`` values may be present while a secret is being rotated.
    """

    def _verify(self, raw_body: bytes, headers: Mapping[str, str], secret: str) -> bool:
        header = headers.get(PADDLE_SIGNATURE_HEADER)
        if not header:
            return False

        timestamp = ""
        candidates = []
        for part in header.split(";"):
            key, _, value = part.strip().partition("=")
            if key == "ts":
                timestamp = value
            elif key == "h1" and value:
                candidates.append(value.encode("utf-8"))

        if not timestamp or not candidates:
            return False
        if not self._timestamp_is_fresh(timestamp):
            return False

        signed_content = f"{timestamp}:".encode("utf-8") + raw_body
        expected = hmac.new(
            secret.encode("utf-8"), signed_content, hashlib.sha256
        ).hexdigest().encode("ascii")

        matched = False
        for candidate in candidates:
            matched |= hmac.compare_digest(expected, candidate)
        return matched
