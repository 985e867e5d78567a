from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Decision


class DomainError(Exception):
    """Base domain error."""


class PolicyError(DomainError):
    pass


class UnknownPolicyError(PolicyError, KeyError):
    def __str__(self) -> str:
        return Exception.__str__(self)


class RateLimitExceeded(DomainError):
    """
    Quota for the current window is used up.
    Never retried internally: the client should come back after `retry_after` seconds.
    """

    def __init__(self, *, policy: str, decision: Decision, retry_after: int) -> None:
        super().__init__(f"rate limit exceeded for policy {policy!r}, retry after {retry_after}s")
        self.policy = policy
        self.decision = decision
        self.retry_after = retry_after
