"""Similarity group, membership and vote models.

Two similar artists share one similarity group. The group carries the score,
and two membership rows (group, artist A) and (group, artist B) make the pair
discoverable from either side: the artists similar to X are found by joining
memberships on group id where the artist id differs from X. The group also
records its pair in canonical order (lower id first), unique per pair.
"""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from artsim.core.database import Base

INITIAL_SCORE = 200
VOTE_UP = "up"
VOTE_DOWN = "down"


class SimilarityGroup(Base):
    """Undirected similarity edge with its shared score."""

    __tablename__ = "similarity_groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    score = Column(Integer, nullable=False, default=INITIAL_SCORE, index=True)
    low_artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), nullable=False)
    high_artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), nullable=False)

    # Relationships (CASCADE delete so removing a group leaves no traces)
    members = relationship("SimilarityMembership", back_populates="group", cascade="all, delete-orphan")
    votes = relationship("SimilarityVote", back_populates="group", cascade="all, delete-orphan")

    __table_args__ = (UniqueConstraint("low_artist_id", "high_artist_id", name="uq_similarity_group_pair"),)


class SimilarityMembership(Base):
    """One side of a similarity group."""

    __tablename__ = "similarity_memberships"

    group_id = Column(Integer, ForeignKey("similarity_groups.id", ondelete="CASCADE"), primary_key=True)
    artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), primary_key=True)

    group = relationship("SimilarityGroup", back_populates="members")
    artist = relationship("Artist")

    __table_args__ = (Index("idx_similarity_memberships_artist", "artist_id", "group_id"),)


class SimilarityVote(Base):
    """A user's directional vote on a similarity group."""

    __tablename__ = "similarity_votes"

    group_id = Column(Integer, ForeignKey("similarity_groups.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, primary_key=True)
    direction = Column(String(4), primary_key=True)

    group = relationship("SimilarityGroup", back_populates="votes")

    __table_args__ = (
        CheckConstraint("direction IN ('up', 'down')", name="ck_similarity_vote_direction"),
    )
