"""Similar artist graph: fetch an artist's neighbourhood and lay it out."""
import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from artsim.core.cache import Cache
from artsim.core.config import settings
from artsim.models.artist import Artist
from artsim.repositories.similarity_repository import SimilarityRepository
from artsim.services.similar_layout import Neighbor, compute_layout, layout_to_dict
from artsim.services.similar_ledger import POSITION_KEY

logger = logging.getLogger(__name__)


class SimilarGraph:
    """Positions of the similar artists of one artist, cached per artist."""

    def __init__(self, artist: Artist, session: Session, cache: Cache, limit: Optional[int] = None):
        self.artist = artist
        self.repository = SimilarityRepository(session)
        self.cache = cache
        self.limit = limit or settings.SIMILAR_ARTIST_LIMIT

    def similar_graph(self, width: int, height: int) -> Dict[int, dict]:
        """Lay out the similar artists on a width x height canvas.

        Returns:
            Mapping of artist id to name, score, votes, related, x, y and
            proportion, in placement order. Empty if the artist has no
            similar artists.
        """
        key = POSITION_KEY.format(self.artist.id)
        cached = self.cache.get_value(key)
        if cached and cached["width"] == width and cached["height"] == height:
            return {node["artist_id"]: node for node in cached["nodes"]}

        graph = self._compute(width, height)
        self.cache.cache_value(
            key, {"width": width, "height": height, "nodes": list(graph.values())}
        )
        return graph

    def _compute(self, width: int, height: int) -> Dict[int, dict]:
        rows = self.repository.get_graph_neighbors(self.artist.id, limit=self.limit)
        if not rows:
            return {}

        neighbors = [
            Neighbor(
                artist_id=row["artist_id"],
                name=row["name"],
                score=row["score"],
                votes=row["votes"],
            )
            for row in rows
        ]
        relations = self.repository.get_mutual_relations([n.artist_id for n in neighbors])
        logger.info(
            f"Laying out {len(neighbors)} similar artists of artist {self.artist.id} "
            f"with {sum(len(r) for r in relations.values()) // 2} mutual relations"
        )
        layout = compute_layout(self.artist.id, neighbors, relations, width, height)
        return layout_to_dict(layout)
