"""API router."""

from fastapi import APIRouter

from parkbook.api.endpoints import bookings, monitor, slots

api_router = APIRouter()

api_router.include_router(slots.router, prefix="/slots", tags=["slots"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(monitor.router, prefix="/monitor", tags=["monitor"])
