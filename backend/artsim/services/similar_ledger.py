"""Similarity ledger: pairs of similar artists, their scores and votes.

Two similar artists share one similarity group carrying a single score, so
"A is similar to B" and "B is similar to A" can never disagree. Users raise
or lower that score by voting. Every change to a group runs in one
transaction, and the cached similarity data of both artists is flushed once
it commits.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from artsim.core.cache import Cache
from artsim.core.config import settings
from artsim.models.artist import Artist
from artsim.models.similarity import VOTE_DOWN, VOTE_UP
from artsim.models.user import User
from artsim.repositories.similarity_repository import SimilarityRepository
from artsim.repositories.site_log_repository import SiteLogRepository

logger = logging.getLogger(__name__)

CACHE_KEY = "artsim_{}"
POSITION_KEY = "artpos_{}"

ADD_BOOST = 200
VOTE_STEP = 100


class SimilarityLedgerError(RuntimeError):
    """A ledger transaction failed and was rolled back."""


class SimilarPairConflict(SimilarityLedgerError):
    """Another transaction created the same pair first."""


class SimilarArtists:
    """Similarity ledger seen from one artist.

    The similar artist of a pair is always called "other" to keep it apart
    from the similarity group id.
    """

    def __init__(
        self,
        artist: Artist,
        session: Session,
        cache: Cache,
        site_log: Optional[SiteLogRepository] = None,
        limit: Optional[int] = None,
    ):
        """Initialize the ledger for an artist.

        Args:
            artist: Artist whose similarities are managed
            session: Database session
            cache: Cache holding similarity listings and layouts
            site_log: Audit log, defaults to one on the same session
            limit: Size of the cached similarity window
        """
        self.artist = artist
        self.session = session
        self.cache = cache
        self.site_log = site_log or SiteLogRepository(session)
        self.limit = limit or settings.SIMILAR_ARTIST_LIMIT
        self.repository = SimilarityRepository(session)
        self._info: Optional[List[dict]] = None

    @property
    def id(self) -> int:
        return self.artist.id

    def _for(self, other: Artist) -> "SimilarArtists":
        return SimilarArtists(other, self.session, self.cache, self.site_log, self.limit)

    def flush(self) -> "SimilarArtists":
        """Drop the cached listing and layout of this artist."""
        self.cache.delete_multi([CACHE_KEY.format(self.id), POSITION_KEY.format(self.id)])
        self._info = None
        return self

    def info(self) -> List[dict]:
        """Get the best scoring similar artists, cached.

        Returns:
            Up to `limit` dicts with artist_id, name, score and similar_id,
            ordered by score desc then name
        """
        if self._info is not None:
            return self._info
        key = CACHE_KEY.format(self.id)
        info = self.cache.get_value(key)
        if info is None:
            info = self.repository.get_similar_artists(self.id, limit=self.limit)
            self.cache.cache_value(key, info)
        self._info = info
        return self._info

    def find_group(self, other: Artist) -> Optional[int]:
        """Find the similarity group shared with another artist.

        Only the cached top similarities are searched: a pair ranked below
        the window is reported as not similar.

        Returns:
            Similarity group id, or None
        """
        for row in self.info():
            if row["artist_id"] == other.id:
                return row["similar_id"]
        return None

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Conflicting write while trying to {action} for artist {self.id}: {e}")
            raise SimilarPairConflict(f"Could not {action}: the pair changed concurrently") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {action} for artist {self.id}: {e}", exc_info=True)
            raise SimilarityLedgerError(f"Could not {action}") from e
        except Exception:
            self.session.rollback()
            raise

    def _flush_pair(self, other: Artist) -> None:
        self.flush()
        self._for(other).flush()

    def add_similar(self, other: Artist, actor: User) -> int:
        """Declare another artist similar, or upvote an existing pair.

        An existing pair is boosted only when the actor has not voted on it
        yet, and a user who has not voted is recorded as voting it up.

        Returns:
            1 if an up vote was recorded, 0 if the user had already voted

        Raises:
            SimilarPairConflict: If the pair was created by another
                transaction after this ledger last read its listing
        """
        try:
            with self._transaction("add similar artist"):
                group_id = self.find_group(other)
                if group_id:
                    self.repository.boost_unless_voted(group_id, actor.id, ADD_BOOST)
                else:
                    group_id = self.repository.create_group(self.id, other.id).id
                    self.site_log.general(
                        f"User {actor.label()} set artist {self.artist.label()} similar to artist {other.label()}"
                    )
                affected = 0
                if not self.repository.has_voted(group_id, actor.id):
                    affected = self.repository.add_vote_if_absent(group_id, actor.id, VOTE_UP)
        except SimilarPairConflict:
            # the pair was created elsewhere; drop the stale listings
            self._flush_pair(other)
            raise

        logger.info(
            f"User {actor.id} added artist {other.id} as similar to {self.id} "
            f"(group={group_id}, affected={affected})"
        )
        self._flush_pair(other)
        return affected

    def vote_similar(self, other: Artist, actor: User, upvote: bool) -> bool:
        """Vote a similar pair up or down.

        Voting against one's own earlier vote flips it: the score moves a
        single step and the old vote row is replaced by one in the new
        direction, so the user never holds both.

        Returns:
            True if anything changed
        """
        vote = VOTE_UP if upvote else VOTE_DOWN
        opposite = VOTE_DOWN if upvote else VOTE_UP
        step = VOTE_STEP if upvote else -VOTE_STEP

        with self._transaction("vote on similar artist"):
            group_id = self.find_group(other)
            if not group_id:
                return False
            if self.repository.has_vote(group_id, actor.id, vote):
                return False

            self.repository.adjust_score(group_id, step)
            self.repository.delete_vote(group_id, actor.id, opposite)
            self.repository.add_vote_if_absent(group_id, actor.id, vote)

        logger.info(f"User {actor.id} voted {vote} on similar artists {self.id}/{other.id}")
        self._flush_pair(other)
        return True

    def remove_similar(self, other: Artist, actor: User) -> bool:
        """Remove the similarity between this artist and another.

        Returns:
            True if a similarity was removed
        """
        with self._transaction("remove similar artist"):
            group_id = self.find_group(other)
            if not group_id:
                return False
            self.repository.delete_group(group_id)
            self.site_log.general(
                f"User {actor.label()} removed artist {self.artist.label()} similar to artist {other.label()}"
            )

        logger.info(f"User {actor.id} removed similar artists {self.id}/{other.id}")
        self._flush_pair(other)
        return True
