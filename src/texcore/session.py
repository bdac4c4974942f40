from __future__ import annotations

import logging
from typing import List, Optional

from .errors import SessionStateError
from .hashing import new_token
from .models import PaperMetadata, PaperResult, Phase, SessionSnapshot, Status

logger = logging.getLogger(__name__)

CONTENT_UNREADABLE = "Content unreadable"


class Session:
    """Phase plus ordered per-paper results for one uploaded document.

    Results are mutated in place, one at a time; observers only ever see
    copies produced by ``snapshot()``.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or new_token()
        self.phase = Phase.IDLE
        self.results: List[PaperResult] = []
        self.error_message: Optional[str] = None

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise SessionStateError(
                f"Session is {self.phase.value}; expected one of: {allowed}"
            )

    def begin_analysis(self) -> None:
        self._require(Phase.IDLE, Phase.FINISHED, Phase.FAILED)
        self.results = []
        self.error_message = None
        self.phase = Phase.ANALYZING

    def analysis_succeeded(self, papers: List[PaperMetadata]) -> None:
        self._require(Phase.ANALYZING)
        self.results = [PaperResult(metadata=p) for p in papers]
        self.phase = Phase.PROCESSING

    def analysis_failed(self, message: str) -> None:
        self._require(Phase.ANALYZING)
        self.error_message = message
        self.phase = Phase.FAILED

    def mark_processing(self, position: int) -> None:
        self._require(Phase.PROCESSING)
        busy = [r for r in self.results if r.status is Status.PROCESSING]
        if busy:
            raise SessionStateError(
                f"Paper {busy[0].metadata.index} is still processing"
            )
        self.results[position].status = Status.PROCESSING

    def mark_success(self, position: int, content: str) -> None:
        self._require(Phase.PROCESSING)
        item = self.results[position]
        item.status = Status.SUCCESS
        item.content = content
        item.error_message = None

    def mark_error(self, position: int, message: str) -> None:
        self._require(Phase.PROCESSING)
        item = self.results[position]
        item.status = Status.ERROR
        item.content = None
        item.error_message = message

    def finish(self) -> None:
        self._require(Phase.PROCESSING)
        self.phase = Phase.FINISHED

    def reset(self) -> None:
        self.results = []
        self.error_message = None
        self.phase = Phase.IDLE

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            phase=self.phase,
            results=tuple(r.copy() for r in self.results),
            error_message=self.error_message,
        )


class SessionStore:
    """Holds the current session; anything published by an older one is dropped."""

    def __init__(self):
        self.current = Session()
        self.latest: SessionSnapshot = self.current.snapshot()

    def new_session(self) -> Session:
        self.current = Session()
        self.latest = self.current.snapshot()
        logger.debug(f"Started session {self.current.session_id}")
        return self.current

    def reset(self) -> SessionSnapshot:
        """Return to an empty idle session.

        A request still running for the previous session keeps its own Session
        object, so its late results never reach the new one.
        """
        self.current = Session()
        self.latest = self.current.snapshot()
        return self.latest

    def is_current(self, session: Session) -> bool:
        return session is self.current

    def is_current_id(self, session_id: str) -> bool:
        return session_id == self.current.session_id

    def publish(self, session: Session) -> Optional[SessionSnapshot]:
        if not self.is_current(session):
            logger.info(f"Dropping update from stale session {session.session_id}")
            return None
        self.latest = session.snapshot()
        return self.latest
