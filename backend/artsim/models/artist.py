"""Artist model."""
from sqlalchemy import Column, Integer, String

from artsim.core.database import Base


class Artist(Base):
    """Catalog artist, referenced by id from similarity memberships."""

    __tablename__ = "artists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)

    def label(self) -> str:
        return f"{self.name} ({self.id})"
