"""Versioned API routes mounted under /api/v1."""

from fastapi import APIRouter

from studyroom.routes.v1 import health, reservations, rooms

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(rooms.router, prefix="/rooms")
api_v1.include_router(reservations.router, prefix="/reservations")
api_v1.include_router(health.router)

__all__ = ["api_v1"]
