"""Database models."""
from artsim.models.artist import Artist
from artsim.models.user import User
from artsim.models.similarity import SimilarityGroup, SimilarityMembership, SimilarityVote
from artsim.models.site_log import SiteLog

__all__ = [
    "Artist",
    "User",
    "SimilarityGroup",
    "SimilarityMembership",
    "SimilarityVote",
    "SiteLog",
]
