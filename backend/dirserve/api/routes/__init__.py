"""API route registration."""

from fastapi import APIRouter

from dirserve.api.routes import health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
