"""Abstract repository interface for the storage layer."""

from abc import ABC, abstractmethod

from models import SessionSummary
from session import Session


class SessionRepository(ABC):
    """Abstract interface for session storage.

    Implementations raise ``errors.PersistenceError`` when the backing store
    fails. Callers are expected to log and propagate; nothing here retries.
    """

    @abstractmethod
    def save(self, session: Session) -> Session:
        """Insert or update a session together with its answer history.

        Args:
            session: The session to store.

        Returns:
            The stored session.
        """
        pass

    @abstractmethod
    def get_by_id(self, session_id: str) -> Session | None:
        """Load a single session by ID.

        Args:
            session_id: The session ID.

        Returns:
            The session, or None if not found.
        """
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a session and its history.

        Returns:
            True if a session was deleted, False if it did not exist.
        """
        pass

    @abstractmethod
    def list_summaries(
        self, course_id: str | None = None, active_only: bool = False
    ) -> list[SessionSummary]:
        """List stored sessions, newest first.

        Args:
            course_id: Only list sessions for this course.
            active_only: Only list sessions that have not finished.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of stored sessions."""
        pass
