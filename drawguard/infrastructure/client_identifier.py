from __future__ import annotations

import struct
from typing import Mapping

from drawguard.constants import (
    HEADER_FORWARDED_FOR,
    HEADER_REAL_IP,
    HEADER_USER_AGENT,
    UNKNOWN_CLIENT,
)


def _utf16_units(text: str) -> tuple[int, ...]:
    data = text.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)


def hash_user_agent(user_agent: str) -> int:
    """
    Fold a string into a signed 32-bit int: h = h * 31 + unit over UTF-16 code units.
    Not collision resistant ("Aa" and "BB" share a bucket).
    """
    h = 0
    for unit in _utf16_units(user_agent):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x1_0000_0000 if h & 0x8000_0000 else h


def client_address(headers: Mapping[str, str]) -> str:
    forwarded = headers.get(HEADER_FORWARDED_FOR)
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = (headers.get(HEADER_REAL_IP) or "").strip()
    return real_ip or UNKNOWN_CLIENT


def derive_identifier(headers: Mapping[str, str]) -> str:
    """
    Bucket key for a caller: "<address>:<user-agent hash>".
    Clients behind one NAT with the same user agent share a key.
    """
    user_agent = headers.get(HEADER_USER_AGENT) or UNKNOWN_CLIENT
    return f"{client_address(headers)}:{hash_user_agent(user_agent)}"
