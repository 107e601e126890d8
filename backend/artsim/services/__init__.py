"""Services package."""
from artsim.services.similar_graph import SimilarGraph
from artsim.services.similar_layout import LayoutNode, Neighbor, compute_layout
from artsim.services.similar_ledger import (
    SimilarArtists,
    SimilarityLedgerError,
    SimilarPairConflict,
)

__all__ = [
    "SimilarArtists",
    "SimilarityLedgerError",
    "SimilarPairConflict",
    "SimilarGraph",
    "Neighbor",
    "LayoutNode",
    "compute_layout",
]
