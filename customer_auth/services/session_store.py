"""In-memory storage for OAuth sessions correlating start and callback."""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class SessionStatus(str, enum.Enum):
    PENDING = "pending"
    EXCHANGING = "exchanging"
    COMPLETED = "completed"


class SessionExistsError(Exception):
    """Raised when creating a session whose identifier is already stored."""


class SessionStoreFullError(Exception):
    """Raised when the store is at capacity and nothing could be evicted."""


@dataclass(frozen=True, slots=True)
class AuthSession:
    """One in-flight or completed authorization attempt."""

    session_id: str
    state: str
    redirect_uri: str
    store: str
    status: SessionStatus = SessionStatus.PENDING
    token: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    completed_at: Optional[float] = None

    @property
    def is_completed(self) -> bool:
        return self.status is SessionStatus.COMPLETED and self.token is not None

    def is_expired(
        self, now: float, *, pending_ttl: float, completed_ttl: float
    ) -> bool:
        if self.completed_at is not None:
            return (now - self.completed_at) > completed_ttl
        return (now - self.created_at) > pending_ttl

    def claim(self) -> "AuthSession":
        return replace(self, status=SessionStatus.EXCHANGING)

    def release(self) -> "AuthSession":
        return replace(self, status=SessionStatus.PENDING)

    def complete(self, token: str, *, now: float) -> "AuthSession":
        return replace(
            self, status=SessionStatus.COMPLETED, token=token, completed_at=now
        )


class SessionStore:
    """Process-local session map with TTL expiry and a capacity bound.

    Every mutation happens under a single lock, which makes the
    read-check-write performed by :meth:`update` atomic per session.
    """

    def __init__(
        self,
        *,
        pending_ttl_seconds: float = 600,
        completed_ttl_seconds: float = 3600,
        max_entries: int = 10_000,
        clock: Clock = time.time,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._pending_ttl = pending_ttl_seconds
        self._completed_ttl = completed_ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._sessions: Dict[str, AuthSession] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def _expired(self, session: AuthSession, now: float) -> bool:
        return session.is_expired(
            now,
            pending_ttl=self._pending_ttl,
            completed_ttl=self._completed_ttl,
        )

    def _live(self, session_id: str, now: float) -> Optional[AuthSession]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._expired(session, now):
            del self._sessions[session_id]
            return None
        return session

    def _sweep_locked(self, now: float) -> int:
        expired = [
            sid for sid, session in self._sessions.items() if self._expired(session, now)
        ]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def create(self, session: AuthSession) -> None:
        with self._lock:
            now = self._clock()
            removed = self._sweep_locked(now)
            if removed:
                logger.debug("Evicted %s expired sessions", removed)
            if session.session_id in self._sessions:
                raise SessionExistsError("session identifier already in use")
            if len(self._sessions) >= self._max_entries:
                raise SessionStoreFullError(
                    f"session store is at capacity ({self._max_entries})"
                )
            self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Optional[AuthSession]:
        with self._lock:
            return self._live(session_id, self._clock())

    def update(
        self, session_id: str, mutator: Callable[[AuthSession], AuthSession]
    ) -> Optional[AuthSession]:
        """Replace a live session with ``mutator(session)``.

        The mutator runs under the store lock; an exception raised by it
        leaves the stored record untouched and propagates to the caller.
        """
        with self._lock:
            current = self._live(session_id, self._clock())
            if current is None:
                return None
            updated = mutator(current)
            if updated.session_id != current.session_id or updated.state != current.state:
                raise ValueError("session identity and state are immutable")
            if current.token is not None and updated.token != current.token:
                raise ValueError("a stored token cannot be replaced or removed")
            self._sessions[session_id] = updated
            return updated

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def sweep(self) -> int:
        """Evict expired sessions and return how many were removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = [
    "AuthSession",
    "SessionExistsError",
    "SessionStatus",
    "SessionStore",
    "SessionStoreFullError",
]
