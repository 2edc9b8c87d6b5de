"""API routers for the flights service."""

from fastapi import APIRouter

from .aircraft import router as aircraft_router
from .health import router as health_router
from .months import router as months_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(aircraft_router)
api_router.include_router(months_router)

__all__ = ["api_router"]
