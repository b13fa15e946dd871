"""Per-plugin session state and the initialization state machine.

State transitions:
    UNINITIALIZED -> INITIALIZED (terminal for the process lifetime)

Only one initialization attempt is made per plugin instance.  The attempt is
claimed synchronously, before the first ``await``, so two prompt events
racing on the same event loop cannot both send ``sessions/init``.  A failed
attempt is final: a later worker recovery does not trigger another one.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Initialization state of a session."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


def generate_session_id(platform: str) -> str:
    """Build ``<platform>-<epoch ms>-<9 random chars>``, unique per process."""
    return f"{platform}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


@dataclass
class Session:
    """One host conversation.  Owned by a single plugin instance."""

    session_id: str
    project: str
    directory: str | None = None
    state: SessionState = SessionState.UNINITIALIZED
    remote_session_id: int | None = None
    init_attempted: bool = False

    @property
    def initialized(self) -> bool:
        return self.state is SessionState.INITIALIZED


def new_session(platform: str, project: str, directory: str | None = None) -> Session:
    return Session(
        session_id=generate_session_id(platform),
        project=project,
        directory=directory,
    )


class SessionSequencer:
    """Enforces at-most-once initialization for one session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    @property
    def can_dispatch(self) -> bool:
        """Whether session-scoped events (observations, summaries) may be sent."""
        return self._session.initialized

    def begin_initialization(self) -> bool:
        """Claim the single initialization attempt.

        Returns:
            ``True`` for the first caller only; ``False`` afterwards,
            whether or not that attempt succeeded.
        """
        if self._session.init_attempted:
            return False
        self._session.init_attempted = True
        return True

    def complete_initialization(self, remote_session_id: object = None) -> None:
        """Mark the session initialized and record the worker's session id.

        Args:
            remote_session_id: ``sessionDbId`` from the worker; kept only if
                it is an integer.
        """
        if self._session.initialized:
            return
        if isinstance(remote_session_id, int) and not isinstance(remote_session_id, bool):
            self._session.remote_session_id = remote_session_id
        self._session.state = SessionState.INITIALIZED
        logger.debug(
            "Session %s initialized (remote id %s)",
            self._session.session_id,
            self._session.remote_session_id,
        )
