"""Conversation message log collaborator"""
import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class LoggedMessage:
    """One message of a conversation"""
    session_id: str
    role: str  # 'user' or 'assistant'
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class LogConfig:
    """Limits for the in-memory log"""
    max_sessions: int = field(default_factory=lambda: settings.CONVERSATION_LOG_MAX_SESSIONS)
    max_messages: int = field(default_factory=lambda: settings.CONVERSATION_LOG_MAX_MESSAGES)


class ConversationLog(ABC):
    """Append-only record of chat turns"""

    @abstractmethod
    def record(self, session_id: str, role: str, text: str,
               metadata: Optional[Dict[str, Any]] = None):
        """Append one message to a conversation"""

    @abstractmethod
    def get_history(self, session_id: str, limit: int = 50) -> List[LoggedMessage]:
        """Get the most recent messages of a conversation in chronological order"""


class InMemoryConversationLog(ConversationLog):
    """
    Process-local conversation log.

    Keeps the last `max_messages` messages of each session and at most
    `max_sessions` sessions; the least recently active session is evicted
    first.
    """

    def __init__(self, config: Optional[LogConfig] = None):
        self.config = config or LogConfig()
        self._messages: "OrderedDict[str, Deque[LoggedMessage]]" = OrderedDict()
        self._lock = threading.Lock()

    def record(self, session_id: str, role: str, text: str,
               metadata: Optional[Dict[str, Any]] = None):
        message = LoggedMessage(session_id=session_id, role=role, text=text,
                                metadata=dict(metadata or {}))
        with self._lock:
            history = self._messages.get(session_id)
            if history is None:
                history = deque(maxlen=self.config.max_messages)
                self._messages[session_id] = history
            else:
                self._messages.move_to_end(session_id)
            history.append(message)

            while len(self._messages) > self.config.max_sessions:
                evicted, _ = self._messages.popitem(last=False)
                logger.debug(f"Evicted conversation log for session {evicted}")

    def get_history(self, session_id: str, limit: int = 50) -> List[LoggedMessage]:
        with self._lock:
            return list(self._messages.get(session_id, ()))[-limit:]

    @property
    def session_count(self) -> int:
        return len(self._messages)
