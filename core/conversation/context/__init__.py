"""Context validation components"""

from .validators import ContextValidator, ValidationError

__all__ = [
    'ContextValidator',
    'ValidationError',
]
