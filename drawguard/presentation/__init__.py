from .decorators import with_rate_limit

__all__ = ["with_rate_limit"]
