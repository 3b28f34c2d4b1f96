"""Conversation orchestration components"""

from .orchestrator import DialogueOrchestrator, ACTION_INTENTS

__all__ = [
    'DialogueOrchestrator',
    'ACTION_INTENTS',
]
