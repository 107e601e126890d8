"""User model."""
from sqlalchemy import Column, Integer, String

from artsim.core.database import Base


class User(Base):
    """User who adds and votes on similarities."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)

    def label(self) -> str:
        return f"{self.username} ({self.id})"
