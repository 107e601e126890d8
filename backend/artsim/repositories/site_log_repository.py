"""Site log repository."""
import logging

from sqlalchemy.orm import Session

from artsim.models.site_log import SiteLog
from artsim.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SiteLogRepository(BaseRepository[SiteLog]):
    """Append-only audit log written inside the caller's transaction."""

    def __init__(self, session: Session):
        super().__init__(SiteLog, session)

    def general(self, message: str) -> SiteLog:
        """Record a human readable audit line.

        The row becomes visible when the surrounding transaction commits.
        """
        logger.info(f"[SITELOG] {message}")
        entry = SiteLog(message=message)
        self.session.add(entry)
        return entry
