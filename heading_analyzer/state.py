"""Per-session analysis state for the web interface."""
from __future__ import annotations

import logging
import os
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from .schemas import AnalysisResult

logger = logging.getLogger(__name__)

MAX_SESSIONS = int(os.getenv("SESSION_STORE_MAX", "256") or 0) or 256


class AnalysisInProgressError(RuntimeError):
    """Raised when a session starts a run while another is outstanding."""


@dataclass
class AnalysisSession:
    """State owned by one browser session.

    A new run clears the previous result and error before fetching, and the
    outcome of the run replaces them wholesale.
    """

    url: str = ""
    result: Optional[AnalysisResult] = None
    report: Optional[str] = None
    error: Optional[str] = None
    is_loading: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def begin(self, url: str) -> None:
        with self._lock:
            if self.is_loading:
                raise AnalysisInProgressError("An analysis is already running for this session.")
            self.is_loading = True
        self.url = url
        self.result = None
        self.report = None
        self.error = None

    def complete(self, result: AnalysisResult, report: str) -> None:
        self.result = result
        self.error = None
        self.report = report
        self.is_loading = False

    def fail(self, message: str) -> None:
        self.error = message
        self.is_loading = False

    @property
    def has_results(self) -> bool:
        return self.result is not None and not self.is_loading


class SessionStore:
    """In-memory registry of sessions keyed by the id held in the session cookie.

    Holds at most ``max_sessions`` entries. Looking a session up marks it as
    recently used, and the least recently used one is dropped once the limit
    is exceeded. A browser whose session was dropped simply starts afresh.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, AnalysisSession] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str]) -> Optional[AnalysisSession]:
        if not session_id:
            return None
        with self._lock:
            state = self._sessions.get(session_id)
            if state is not None:
                self._sessions.move_to_end(session_id)
            return state

    def get_or_create(self, session_id: str) -> AnalysisSession:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is not None:
                self._sessions.move_to_end(session_id)
                return state
            state = AnalysisSession()
            self._sessions[session_id] = state
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug("Evicted analysis session %s", evicted)
            return state

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
