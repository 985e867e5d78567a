from __future__ import annotations


UNKNOWN_CLIENT: str = "unknown"

HEADER_FORWARDED_FOR: str = "X-Forwarded-For"
HEADER_REAL_IP: str = "X-Real-IP"
HEADER_USER_AGENT: str = "User-Agent"

HEADER_LIMIT: str = "X-RateLimit-Limit"
HEADER_REMAINING: str = "X-RateLimit-Remaining"
HEADER_RESET: str = "X-RateLimit-Reset"
HEADER_RETRY_AFTER: str = "Retry-After"

# Client-facing, short messages (no internals)
MSG_RATE_LIMITED_ERROR: str = "Rate limit exceeded"
MSG_RATE_LIMITED: str = "Too many requests. Please try again later."
