"""Similar artist endpoints."""
import logging
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from artsim.core.auth import get_current_user
from artsim.core.cache import Cache, get_cache
from artsim.core.database import get_db
from artsim.models.artist import Artist
from artsim.models.user import User
from artsim.repositories import ArtistRepository
from artsim.services import SimilarArtists, SimilarGraph, SimilarityLedgerError, SimilarPairConflict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/artists/{artist_id}/similar")


class SimilarArtistResponse(BaseModel):
    """One entry of an artist's similar artist listing."""

    artist_id: int
    name: str
    score: int
    similar_id: int


class GraphNodeResponse(BaseModel):
    """A positioned similar artist."""

    artist_id: int
    name: str
    score: int
    votes: int
    related: List[int]
    x: float
    y: float
    proportion: float


class AddSimilarRequest(BaseModel):
    """Request to declare an artist similar."""

    other_id: int


class VoteSimilarRequest(BaseModel):
    """Request to vote on a similar artist pair."""

    other_id: int
    direction: Literal["up", "down"]


def get_artist(artist_id: int, session: Session) -> Artist:
    """Look up an artist or fail with 404."""
    artist = ArtistRepository(session).get_by_id(artist_id)
    if not artist:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Artist {artist_id} not found")
    return artist


@router.get("", response_model=List[SimilarArtistResponse])
def list_similar(
    artist_id: int,
    session: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """List the best scoring similar artists of an artist."""
    artist = get_artist(artist_id, session)
    return SimilarArtists(artist, session, cache).info()


@router.get("/graph", response_model=List[GraphNodeResponse])
def similar_graph(
    artist_id: int,
    width: int = Query(default=800, ge=1, le=4096),
    height: int = Query(default=600, ge=1, le=4096),
    session: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """
    Get the layout of an artist's similar artists.

    Nodes are returned in placement order; coordinates are relative to a
    width x height canvas with the artist at its centre.
    """
    artist = get_artist(artist_id, session)
    graph = SimilarGraph(artist, session, cache).similar_graph(width, height)
    return list(graph.values())


@router.post("")
def add_similar(
    artist_id: int,
    request: AddSimilarRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """Declare two artists similar, or upvote the existing similarity."""
    if request.other_id == artist_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="An artist cannot be similar to itself")
    artist = get_artist(artist_id, session)
    other = get_artist(request.other_id, session)
    try:
        affected = SimilarArtists(artist, session, cache).add_similar(other, user)
    except SimilarPairConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except SimilarityLedgerError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"affected": affected}


@router.post("/vote")
def vote_similar(
    artist_id: int,
    request: VoteSimilarRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """Vote a similar artist pair up or down."""
    artist = get_artist(artist_id, session)
    other = get_artist(request.other_id, session)
    try:
        changed = SimilarArtists(artist, session, cache).vote_similar(
            other, user, upvote=request.direction == "up"
        )
    except SimilarityLedgerError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"changed": changed}


@router.delete("/{other_id}")
def remove_similar(
    artist_id: int,
    other_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
):
    """Remove the similarity between two artists."""
    artist = get_artist(artist_id, session)
    other = get_artist(other_id, session)
    try:
        removed = SimilarArtists(artist, session, cache).remove_similar(other, user)
    except SimilarityLedgerError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"removed": removed}
