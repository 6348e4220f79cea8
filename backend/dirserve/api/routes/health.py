"""Health check."""

from fastapi import APIRouter, Depends

from dirserve import __version__
from dirserve.api.deps import get_config
from dirserve.config import Settings
from dirserve.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(config: Settings = Depends(get_config)):
    """Lightweight connectivity check."""
    return HealthResponse(version=__version__, root=config.root, base_url=config.base_url or "/")


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
