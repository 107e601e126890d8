"""Tests for the similar artist graph service."""
import pytest

from artsim.services.similar_graph import SimilarGraph
from artsim.services.similar_ledger import POSITION_KEY, SimilarArtists


@pytest.fixture
def neighbourhood(db, cache, make_artist, make_user):
    """Anchor with three similar artists, two of which are similar to each other."""
    anchor = make_artist("Anchor")
    first = make_artist("First")
    second = make_artist("Second")
    third = make_artist("Third")
    alice = make_user("alice")
    bob = make_user("bob")

    SimilarArtists(anchor, db, cache).add_similar(first, alice)
    SimilarArtists(anchor, db, cache).add_similar(second, alice)
    SimilarArtists(anchor, db, cache).add_similar(third, alice)
    SimilarArtists(anchor, db, cache).add_similar(first, bob)
    SimilarArtists(first, db, cache).add_similar(second, alice)
    return anchor, first, second, third, alice


def test_no_similar_artists(db, cache, make_artist):
    lonely = make_artist("Lonely")

    assert SimilarGraph(lonely, db, cache).similar_graph(100, 100) == {}


def test_graph_contains_every_neighbor(db, cache, neighbourhood):
    anchor, first, second, third, _ = neighbourhood

    graph = SimilarGraph(anchor, db, cache).similar_graph(100, 100)

    assert set(graph) == {first.id, second.id, third.id}
    assert graph[first.id]["related"] == [second.id]
    assert graph[second.id]["related"] == [first.id]
    assert graph[third.id]["related"] == []
    assert graph[first.id]["score"] == 400
    assert graph[first.id]["votes"] == 2
    assert graph[first.id]["name"] == "First"


def test_related_artists_placed_first(db, cache, neighbourhood):
    anchor, first, second, third, _ = neighbourhood

    graph = SimilarGraph(anchor, db, cache).similar_graph(100, 100)

    assert list(graph) == [first.id, second.id, third.id]
    assert graph[third.id]["proportion"] == 200 / 801


def test_layout_is_cached(db, cache, neighbourhood):
    anchor = neighbourhood[0]

    graph = SimilarGraph(anchor, db, cache).similar_graph(100, 100)

    cached = cache.get_value(POSITION_KEY.format(anchor.id))
    assert cached["width"] == 100
    assert [node["artist_id"] for node in cached["nodes"]] == list(graph)
    assert SimilarGraph(anchor, db, cache).similar_graph(100, 100) == graph


def test_other_canvas_size_is_recomputed(db, cache, neighbourhood):
    anchor = neighbourhood[0]
    SimilarGraph(anchor, db, cache).similar_graph(100, 100)

    graph = SimilarGraph(anchor, db, cache).similar_graph(1000, 1000)

    assert cache.get_value(POSITION_KEY.format(anchor.id))["width"] == 1000
    assert all(node["x"] >= 0 for node in graph.values())


def test_vote_invalidates_layout(db, cache, neighbourhood):
    anchor, first, second, third, alice = neighbourhood
    SimilarGraph(anchor, db, cache).similar_graph(100, 100)

    SimilarArtists(anchor, db, cache).vote_similar(third, alice, upvote=False)

    assert cache.get_value(POSITION_KEY.format(anchor.id)) is None
    graph = SimilarGraph(anchor, db, cache).similar_graph(100, 100)
    assert graph[third.id]["score"] == 100


def test_same_input_same_coordinates(db, cache, neighbourhood):
    anchor = neighbourhood[0]

    first = SimilarGraph(anchor, db, cache)._compute(640, 480)
    second = SimilarGraph(anchor, db, cache)._compute(640, 480)

    assert first == second
    assert len(first) == 3
