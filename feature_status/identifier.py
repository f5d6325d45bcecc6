from __future__ import annotations

import re
from dataclasses import dataclass

import base58

IDENTIFIER_LEN = 32
# 32 bytes never need more than 44 base-58 digits.
MAX_BASE58_LEN = 44

_BASE58_RE = re.compile(r"[1-9A-HJ-NP-Za-km-z]+")


class InvalidIdentifier(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Identifier:
    """32-byte feature id (a public key), rendered as base-58 text."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise InvalidIdentifier(f"identifier must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != IDENTIFIER_LEN:
            raise InvalidIdentifier(
                f"identifier must be {IDENTIFIER_LEN} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_base58(cls, text: str) -> "Identifier":
        if not isinstance(text, str):
            raise InvalidIdentifier(f"identifier text must be str, got {type(text).__name__}")
        if not (IDENTIFIER_LEN <= len(text) <= MAX_BASE58_LEN):
            raise InvalidIdentifier(
                f"identifier text must be {IDENTIFIER_LEN}-{MAX_BASE58_LEN} chars, "
                f"got {len(text)}: {text!r}"
            )
        if not _BASE58_RE.fullmatch(text):
            raise InvalidIdentifier(f"identifier text is not base-58: {text!r}")

        decoded = base58.b58decode(text)
        if len(decoded) > IDENTIFIER_LEN:
            raise InvalidIdentifier(
                f"identifier text decodes to {len(decoded)} bytes: {text!r}"
            )
        # Leading '1's are explicit zero bytes; once present the width must be exact.
        if len(decoded) < IDENTIFIER_LEN and text.startswith("1"):
            raise InvalidIdentifier(
                f"identifier text has leading zero bytes but decodes to {len(decoded)} bytes: {text!r}"
            )
        return cls(decoded.rjust(IDENTIFIER_LEN, b"\x00"))

    def to_base58(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"Identifier({self.to_base58()!r})"
