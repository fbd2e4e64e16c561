from __future__ import annotations

import base64
from typing import Optional, Sequence, Union

BytesLike = Union[bytes, bytearray, memoryview]


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """
    Bytes -> hex string (lowercase). Prefix with '0x' by default.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def strip_hex_prefix(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def octets_to_bytes(values: Sequence[object]) -> Optional[bytes]:
    """
    Sequence of byte-valued ints -> bytes, or None if any element is not an
    int in 0..255 (bools rejected).
    """
    out = bytearray()
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255:
            return None
        out.append(v)
    return bytes(out)


# --- base64url (padding-tolerant) ------------------------------------------


def from_base64url(s: str) -> bytes:
    """Accepts standard or URL-safe alphabet, with or without padding."""
    if not isinstance(s, str):
        raise TypeError("from_base64url expects a string")
    normalized = s.replace("-", "+").replace("_", "/")
    normalized += "=" * ((4 - len(normalized) % 4) % 4)
    return base64.b64decode(normalized, validate=True)


__all__ = [
    "BytesLike",
    "to_hex",
    "strip_hex_prefix",
    "octets_to_bytes",
    "from_base64url",
]
