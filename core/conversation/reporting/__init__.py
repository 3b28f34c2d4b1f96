"""Report slot-filling components"""

from .slot_registry import SlotSchemaRegistry, UnknownReportType
from .answer_validator import AnswerValidator, AnswerCheck
from .dialogue_engine import (
    ReportDialogueEngine,
    ReportTurn,
    SKIP_SIGNAL,
    COMPLETE_SIGNAL,
    init_report_session,
    process_report_answer,
    generate_report_summary,
)

__all__ = [
    'SlotSchemaRegistry',
    'UnknownReportType',
    'AnswerValidator',
    'AnswerCheck',
    'ReportDialogueEngine',
    'ReportTurn',
    'SKIP_SIGNAL',
    'COMPLETE_SIGNAL',
    'init_report_session',
    'process_report_answer',
    'generate_report_summary',
]
