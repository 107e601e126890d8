"""API v1 router."""
from fastapi import APIRouter

from artsim.api.v1 import similar

api_router: APIRouter = APIRouter()
api_router.include_router(similar.router, tags=["similar"])
