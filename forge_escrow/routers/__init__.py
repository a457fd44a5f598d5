"""API routers for the escrow service."""
from fastapi import APIRouter

from . import escrow, health, holdings


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(escrow.router)
    api_router.include_router(holdings.router)
    return api_router
