"""Artist repository."""
from sqlalchemy.orm import Session

from artsim.models.artist import Artist
from artsim.repositories.base_repository import BaseRepository


class ArtistRepository(BaseRepository[Artist]):
    """Repository for Artist model operations."""

    def __init__(self, session: Session):
        super().__init__(Artist, session)
