from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import PolicyError


class PolicyName(str, Enum):
    AUTH = "auth"
    UPLOAD = "upload"
    GENERAL = "general"
    LIKE = "like"


@dataclass(frozen=True, slots=True)
class Policy:
    """
    One rate limiting rule: at most `max_requests` per `window_ms` for a client.
    """
    name: str
    window_ms: int
    max_requests: int

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise PolicyError("Policy name must be non-empty")
        if self.window_ms <= 0:
            raise PolicyError(f"Policy {self.name!r}: window_ms must be > 0, got {self.window_ms}")
        if self.max_requests <= 0:
            raise PolicyError(f"Policy {self.name!r}: max_requests must be > 0, got {self.max_requests}")

    def as_dict(self) -> dict[str, int | str]:
        return {
            "name": self.name,
            "windowMs": self.window_ms,
            "maxRequests": self.max_requests,
        }


DEFAULT_POLICIES: dict[PolicyName, Policy] = {
    PolicyName.AUTH: Policy(name=PolicyName.AUTH.value, window_ms=15 * 60 * 1000, max_requests=5),
    PolicyName.UPLOAD: Policy(name=PolicyName.UPLOAD.value, window_ms=60 * 1000, max_requests=3),
    PolicyName.GENERAL: Policy(name=PolicyName.GENERAL.value, window_ms=60 * 1000, max_requests=60),
    PolicyName.LIKE: Policy(name=PolicyName.LIKE.value, window_ms=60 * 1000, max_requests=30),
}
