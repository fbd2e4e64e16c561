"""
lea_sdk.utils
=============

Small dependency-free helpers shared across the SDK (hex/base64url/bytes).
"""

from .bytes import (  # noqa: F401
    from_base64url,
    octets_to_bytes,
    to_hex,
)

__all__ = [
    "from_base64url",
    "octets_to_bytes",
    "to_hex",
]
