"""Radial layout of an artist's similar artists.

The anchor artist sits at the centre of the canvas and each similar artist is
placed on a ring around it. Angles come from a golden-angle sequence seeded by
the anchor id so the layout is stable for a given artist, and artists that
are similar to each other are clustered on neighbouring angles.

The procedure is order and tie-break sensitive: identical inputs always give
identical coordinates, and changing a comparison changes the picture.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi
GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))

# Distance from the centre, as a fraction of the half canvas, for the weakest
# similarity. Stronger similarities are drawn closer in.
OUTER_RING = 0.9
HOST_SPREAD = 0.4
RELATED_SPREAD = 0.45


@dataclass(frozen=True)
class Neighbor:
    """A similar artist as fetched for the layout."""

    artist_id: int
    name: str
    score: int
    votes: int = 0


@dataclass
class LayoutNode:
    """A positioned similar artist."""

    artist_id: int
    name: str
    score: int
    votes: int
    related: List[int] = field(default_factory=list)
    angle: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    proportion: Optional[float] = None

    @property
    def nr_related(self) -> int:
        return len(self.related)

    def to_dict(self) -> dict:
        return {
            "artist_id": self.artist_id,
            "name": self.name,
            "score": self.score,
            "votes": self.votes,
            "related": list(self.related),
            "x": self.x,
            "y": self.y,
            "proportion": self.proportion,
        }


def golden_angles(seed: int, count: int) -> List[float]:
    """Generate count angles spaced by the golden angle, sorted ascending.

    Consecutive golden-angle steps never land two points exactly opposite
    each other, so no relation line is drawn straight through the centre.
    """
    angles = []
    angle = math.fmod(seed, TWO_PI)
    for _ in range(count):
        angles.append(angle)
        angle = math.fmod(angle + GOLDEN_ANGLE, TWO_PI)
    return sorted(angles)


class _Canvas:
    """Maps an angle and a score onto canvas coordinates."""

    def __init__(self, width: int, height: int, scores: Sequence[int]):
        self.x_origin = width / 2
        self.y_origin = height / 2
        self.min_score = min(scores)
        self.max_score = max(scores)
        self.total_score = sum(scores)
        # equal scores would otherwise divide by zero
        if self.max_score == self.min_score:
            self.range = self.max_score
        else:
            self.range = self.max_score - self.min_score

    def distance(self, score: int, spread: float) -> float:
        if not self.range:
            return OUTER_RING
        return OUTER_RING - (score - self.min_score) * spread / self.range

    def place(self, node: LayoutNode, angle: float, spread: float) -> None:
        distance = self.distance(node.score, spread)
        node.angle = angle
        node.x = int(math.cos(angle) * distance * self.x_origin) + self.x_origin
        node.y = int(math.sin(angle) * distance * self.y_origin) + self.y_origin
        node.proportion = node.score / (self.total_score + 1)


def _thread_relations(
    nodes: Dict[int, LayoutNode], relations: Mapping[int, Sequence[int]]
) -> None:
    """Attach related artist ids to each node, least connected relations first."""
    for source, targets in relations.items():
        if source not in nodes:
            continue
        nodes[source].related.extend(t for t in targets if t in nodes and t != source)

    for node in nodes.values():
        if node.nr_related < 2:
            continue
        node.related.sort(key=lambda r: nodes[r].nr_related)


def _choose_end(
    node: LayoutNode, pool: Deque[float], placed: Dict[int, Optional[float]]
) -> bool:
    """Decide whether to draw from the back of the pool.

    Each already placed relation votes for the end of the pool it sits
    nearer to, front winning ties.
    """
    next_angle = pool[0]
    prev_angle = pool[-1]
    best_next = TWO_PI
    best_prev = TWO_PI
    for r in node.related:
        if placed[r] is None:
            continue
        next_distance = math.fmod(next_angle + placed[r], TWO_PI)
        prev_distance = math.fmod(prev_angle + placed[r], TWO_PI)
        if next_distance <= prev_distance:
            best_next = min(best_next, next_distance)
        else:
            best_prev = min(best_prev, prev_distance)
    return not math.fmod(best_next, TWO_PI) < math.fmod(best_prev, TWO_PI)


def compute_layout(
    anchor_id: int,
    neighbors: Sequence[Neighbor],
    relations: Mapping[int, Sequence[int]],
    width: int,
    height: int,
) -> Dict[int, LayoutNode]:
    """Place the similar artists of an anchor artist on a canvas.

    Args:
        anchor_id: Artist at the centre; seeds the angle sequence
        neighbors: Similar artists, strongest first
        relations: For each neighbor id, the ids of the other neighbors it is
            similar to
        width: Canvas width
        height: Canvas height

    Returns:
        Positioned nodes keyed by artist id, in placement order. Empty when
        there are no neighbors.
    """
    if not neighbors:
        return {}

    nodes: Dict[int, LayoutNode] = {
        n.artist_id: LayoutNode(n.artist_id, n.name, n.score, n.votes) for n in neighbors
    }
    canvas = _Canvas(width, height, [n.score for n in nodes.values()])
    pool: Deque[float] = deque(golden_angles(anchor_id, len(nodes)))

    _thread_relations(nodes, relations)

    # Most connected first, then strongest, then highest id
    order = sorted(
        nodes.values(),
        key=lambda n: (n.nr_related, n.score, n.artist_id),
        reverse=True,
    )

    placed: Dict[int, Optional[float]] = {artist_id: None for artist_id in nodes}
    seen = 0
    for node in order:
        if placed[node.artist_id] is not None:
            continue

        related_to_place = sum(1 for r in node.related if placed[r] is None)
        related_total = node.nr_related

        if related_to_place > 0:
            # Leave room on both ends of the pool for the relations
            pool.rotate(-math.ceil((related_to_place + 1) / 2))

        if not (related_total > 0 and seen > 1):
            angle = pool.popleft()
            up = False
        else:
            up = _choose_end(node, pool, placed)
            angle = pool.pop() if up else pool.popleft()

        placed[node.artist_id] = angle
        seen += 1
        canvas.place(node, angle, HOST_SPREAD)

        # The two ends of the pool are adjacent on the circle, so the first
        # relation goes on the end opposite to the one just drawn from.
        for r in node.related:
            if placed[r] is not None:
                continue
            angle = pool.popleft() if up else pool.pop()
            up = not up
            placed[r] = angle
            seen += 1
            canvas.place(nodes[r], angle, RELATED_SPREAD)

    logger.debug(f"Placed {seen} similar artists around artist {anchor_id}")
    return {node.artist_id: node for node in order}


def layout_to_dict(layout: Mapping[int, LayoutNode]) -> Dict[int, dict]:
    """Render a layout as plain dicts keyed by artist id."""
    return {artist_id: node.to_dict() for artist_id, node in layout.items()}
