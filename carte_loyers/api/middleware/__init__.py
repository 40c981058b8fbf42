"""Middlewares de logging"""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
