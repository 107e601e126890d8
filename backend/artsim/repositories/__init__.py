"""Repository exports."""
from artsim.repositories.artist_repository import ArtistRepository
from artsim.repositories.similarity_repository import SimilarityRepository
from artsim.repositories.site_log_repository import SiteLogRepository

__all__ = [
    "ArtistRepository",
    "SimilarityRepository",
    "SiteLogRepository",
]
