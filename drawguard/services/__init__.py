from .limiters import LimiterRegistry, RateLimiterPort, build_limiters

__all__ = ["LimiterRegistry", "RateLimiterPort", "build_limiters"]
