"""
Core conversation handling system.

This package provides the assistant's conversation engine with:
- Language detection, intent classification and entity extraction
- Report slot-filling dialogues
- Search query parsing, ranking and formatting
- Context validation
- Handler-based request processing
- Middleware pipeline and turn orchestration
"""

from .understanding import (
    LanguageDetector,
    CancellationDetector,
    EntityExtractor,
    IntentClassifier,
    IntentResult,
)
from .reporting import (
    SlotSchemaRegistry,
    ReportDialogueEngine,
    UnknownReportType,
)
from .search import (
    SearchQueryParser,
    SearchRanker,
    format_search_results,
)
from .context import (
    ContextValidator,
)
from .pipeline import (
    MiddlewarePipeline,
)
from .handlers import (
    HandlerRegistry,
    BaseHandler,
)
from .orchestration import (
    DialogueOrchestrator,
)

__all__ = [
    # Understanding
    'LanguageDetector',
    'CancellationDetector',
    'EntityExtractor',
    'IntentClassifier',
    'IntentResult',

    # Reporting
    'SlotSchemaRegistry',
    'ReportDialogueEngine',
    'UnknownReportType',

    # Search
    'SearchQueryParser',
    'SearchRanker',
    'format_search_results',

    # Context
    'ContextValidator',

    # Pipeline
    'MiddlewarePipeline',

    # Handlers
    'HandlerRegistry',
    'BaseHandler',

    # Orchestration
    'DialogueOrchestrator',
]
