"""Conversation handlers for different intent types"""

from .base import BaseHandler, HandlerResponse, HandlerRegistry, TurnRequest
from .report import ReportHandler
from .search import SearchHandler
from .status import StatusHandler
from .help import HelpHandler

__all__ = [
    'BaseHandler',
    'HandlerResponse',
    'HandlerRegistry',
    'TurnRequest',
    'ReportHandler',
    'SearchHandler',
    'StatusHandler',
    'HelpHandler',
]
