from .client_identifier import derive_identifier, hash_user_agent
from .rate_limiter import RateLimiter, epoch_ms
from .redis_rate_limiter import RedisRateLimiter

__all__ = ["RateLimiter", "RedisRateLimiter", "derive_identifier", "epoch_ms", "hash_user_agent"]
