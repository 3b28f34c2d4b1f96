"""Conversation processing pipeline components"""

from .middleware import (
    Middleware,
    LoggingMiddleware,
    ValidationMiddleware,
    ErrorHandlingMiddleware,
    MiddlewarePipeline,
    build_result,
)

__all__ = [
    'Middleware',
    'LoggingMiddleware',
    'ValidationMiddleware',
    'ErrorHandlingMiddleware',
    'MiddlewarePipeline',
    'build_result',
]
