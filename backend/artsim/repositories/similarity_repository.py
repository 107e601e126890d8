"""Similarity group repository for artist relationships."""
from collections import defaultdict
from typing import Dict, List, Sequence

from sqlalchemy import and_, delete, exists, func, select, update
from sqlalchemy.orm import Session, aliased

from artsim.models.artist import Artist
from artsim.models.similarity import (
    INITIAL_SCORE,
    SimilarityGroup,
    SimilarityMembership,
    SimilarityVote,
)
from artsim.repositories.base_repository import BaseRepository


class SimilarityRepository(BaseRepository[SimilarityGroup]):
    """Repository for similarity groups, their memberships and votes."""

    def __init__(self, session: Session):
        """Initialize similarity repository.

        Args:
            session: Database session
        """
        super().__init__(SimilarityGroup, session)

    def get_similar_artists(self, artist_id: int, limit: int = 30) -> List[dict]:
        """Get the best scoring similar artists of an artist.

        Args:
            artist_id: Artist whose similarities are listed
            limit: Maximum number of rows

        Returns:
            List of dicts with artist_id, name, score and similar_id,
            ordered by score desc then name
        """
        s1 = aliased(SimilarityMembership)
        s2 = aliased(SimilarityMembership)
        query = (
            select(
                s2.artist_id.label("artist_id"),
                Artist.name.label("name"),
                SimilarityGroup.score.label("score"),
                SimilarityGroup.id.label("similar_id"),
            )
            .select_from(s1)
            .join(s2, and_(s1.group_id == s2.group_id, s1.artist_id != s2.artist_id))
            .join(SimilarityGroup, SimilarityGroup.id == s1.group_id)
            .join(Artist, Artist.id == s2.artist_id)
            .filter(s1.artist_id == artist_id)
            .order_by(SimilarityGroup.score.desc(), Artist.name)
            .limit(limit)
        )
        result = self.session.execute(query)
        return [dict(row._mapping) for row in result]

    def get_graph_neighbors(self, artist_id: int, limit: int = 30) -> List[dict]:
        """Get similar artists with their vote counts for graph layout.

        Returns:
            List of dicts with artist_id, name, score and votes, ordered by
            score desc, votes desc, then name
        """
        s1 = aliased(SimilarityMembership)
        s2 = aliased(SimilarityMembership)
        votes = func.count(SimilarityVote.group_id).label("votes")
        query = (
            select(
                s2.artist_id.label("artist_id"),
                Artist.name.label("name"),
                SimilarityGroup.score.label("score"),
                votes,
            )
            .select_from(s1)
            .join(s2, and_(s1.group_id == s2.group_id, s1.artist_id != s2.artist_id))
            .join(Artist, Artist.id == s2.artist_id)
            .join(SimilarityGroup, SimilarityGroup.id == s1.group_id)
            .outerjoin(SimilarityVote, SimilarityVote.group_id == s1.group_id)
            .filter(s1.artist_id == artist_id)
            .group_by(s1.group_id, s2.artist_id, Artist.name, SimilarityGroup.score)
            .order_by(SimilarityGroup.score.desc(), votes.desc(), Artist.name, s2.artist_id)
            .limit(limit)
        )
        result = self.session.execute(query)
        return [dict(row._mapping) for row in result]

    def get_mutual_relations(self, artist_ids: Sequence[int]) -> Dict[int, List[int]]:
        """Find which of the given artists are similar to each other.

        Args:
            artist_ids: Artist IDs to restrict both sides of the pair to

        Returns:
            Mapping of artist id to the ids of the other given artists it is
            similar to, in ascending id order
        """
        if not artist_ids:
            return {}

        s1 = aliased(SimilarityMembership)
        s2 = aliased(SimilarityMembership)
        query = (
            select(s1.artist_id, s2.artist_id)
            .select_from(s1)
            .join(s2, and_(s1.group_id == s2.group_id, s1.artist_id != s2.artist_id))
            .filter(and_(s1.artist_id.in_(artist_ids), s2.artist_id.in_(artist_ids)))
            .order_by(s1.artist_id, s2.artist_id)
        )
        relations: Dict[int, List[int]] = defaultdict(list)
        for source, target in self.session.execute(query):
            relations[source].append(target)
        return dict(relations)

    def create_group(self, artist_id: int, other_id: int) -> SimilarityGroup:
        """Create a similarity group and both of its membership rows.

        Args:
            artist_id: One artist of the pair
            other_id: The other artist of the pair

        Returns:
            Created SimilarityGroup with ID populated

        Raises:
            IntegrityError: If the pair already has a group
        """
        low, high = sorted((artist_id, other_id))
        group = SimilarityGroup(score=INITIAL_SCORE, low_artist_id=low, high_artist_id=high)
        self.create(group)
        self.session.add_all(
            [
                SimilarityMembership(group_id=group.id, artist_id=artist_id),
                SimilarityMembership(group_id=group.id, artist_id=other_id),
            ]
        )
        self.session.flush()
        return group

    def delete_group(self, group_id: int) -> bool:
        """Delete a group, cascading to its memberships and votes.

        Returns:
            True if the group existed
        """
        group = self.get_by_id(group_id)
        if group is None:
            return False
        self.delete(group)
        return True

    def adjust_score(self, group_id: int, delta: int) -> int:
        """Add delta to a group's score.

        Returns:
            Number of updated rows
        """
        result = self.session.execute(
            update(SimilarityGroup)
            .where(SimilarityGroup.id == group_id)
            .values(score=SimilarityGroup.score + delta)
        )
        return result.rowcount

    def boost_unless_voted(self, group_id: int, user_id: int, delta: int) -> int:
        """Add delta to a group's score unless the user voted on it already.

        Returns:
            Number of updated rows (0 when the user has a vote)
        """
        voted = exists().where(
            and_(SimilarityVote.group_id == group_id, SimilarityVote.user_id == user_id)
        )
        result = self.session.execute(
            update(SimilarityGroup)
            .where(and_(SimilarityGroup.id == group_id, ~voted))
            .values(score=SimilarityGroup.score + delta)
        )
        return result.rowcount

    def has_voted(self, group_id: int, user_id: int) -> bool:
        """Check whether a user holds any vote on a group."""
        return self.session.execute(
            select(
                exists().where(
                    and_(SimilarityVote.group_id == group_id, SimilarityVote.user_id == user_id)
                )
            )
        ).scalar()

    def has_vote(self, group_id: int, user_id: int, direction: str) -> bool:
        """Check whether a user holds a vote in the given direction."""
        return self.session.execute(
            select(
                exists().where(
                    and_(
                        SimilarityVote.group_id == group_id,
                        SimilarityVote.user_id == user_id,
                        SimilarityVote.direction == direction,
                    )
                )
            )
        ).scalar()

    def add_vote_if_absent(self, group_id: int, user_id: int, direction: str) -> int:
        """Insert a vote row unless an identical one exists.

        Returns:
            Number of inserted rows (0 or 1)
        """
        if self.has_vote(group_id, user_id, direction):
            return 0
        self.session.add(SimilarityVote(group_id=group_id, user_id=user_id, direction=direction))
        self.session.flush()
        return 1

    def delete_vote(self, group_id: int, user_id: int, direction: str) -> int:
        """Delete a user's vote in the given direction.

        Returns:
            Number of deleted rows
        """
        result = self.session.execute(
            delete(SimilarityVote)
            .where(
                and_(
                    SimilarityVote.group_id == group_id,
                    SimilarityVote.user_id == user_id,
                    SimilarityVote.direction == direction,
                )
            )
        )
        return result.rowcount
