"""Site log model."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Text

from artsim.core.database import Base


class SiteLog(Base):
    """Human readable audit line."""

    __tablename__ = "site_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
