from .errors import DomainError, PolicyError, RateLimitExceeded, UnknownPolicyError
from .models import CounterEntry, Decision
from .policies import Policy, PolicyName

__all__ = [
    "CounterEntry",
    "Decision",
    "DomainError",
    "Policy",
    "PolicyError",
    "PolicyName",
    "RateLimitExceeded",
    "UnknownPolicyError",
]
