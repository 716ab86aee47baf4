"""
Route handlers for provider status.
"""
from fastapi import APIRouter
from services.dispatcher import get_dispatcher

router = APIRouter()


@router.get("/status")
async def provider_status():
    """Which providers are enabled and which one serves each capability first."""
    registry = get_dispatcher().registry
    return {
        "providers": registry.status(),
        "active": registry.active_services(),
    }
