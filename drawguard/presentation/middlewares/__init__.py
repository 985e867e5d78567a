from .logging import logging_middleware

__all__ = ["logging_middleware"]
