"""Per-session virtual clock."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fxreplay.db.base import BaseStore
from fxreplay.models import Session
from fxreplay.timeutils import to_utc

logger = logging.getLogger(__name__)


class SessionClock:
    """Moves a session's virtual time cursor independently of wall time.

    No bounds are enforced: the cursor may move backward or past the
    generated price window. Price lookups resolve to the nearest candle.
    """

    def __init__(self, store: BaseStore):
        self._store = store

    def now(self, session_id: int) -> Optional[datetime]:
        """Get the session's virtual time, or None if unset or missing."""
        session = self._store.get_session(session_id)
        return session.current_time if session else None

    def set_time(self, session_id: int, instant: datetime) -> Optional[Session]:
        """Replace the session's virtual time.

        Returns:
            The updated session, or None if it does not exist.
        """
        session = self._store.update_session(session_id, current_time=to_utc(instant))
        if session:
            logger.debug("Session %d clock set to %s", session_id, session.current_time)
        return session

    def advance_time(self, session_id: int, minutes: int) -> Optional[Session]:
        """Shift the session's virtual time by ``minutes`` (may be negative).

        Returns:
            The updated session, or None if the session does not exist or
            its clock has never been set.
        """
        session = self._store.get_session(session_id)
        if session is None or session.current_time is None:
            return None
        return self.set_time(session_id, session.current_time + timedelta(minutes=minutes))
