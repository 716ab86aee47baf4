"""
Worker-compatible proxy endpoint.
POST /api with {prompt, model} returns {response}, or {error} with status 500.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from models.api_models import ProxyRequest
from models.provider_models import ProviderError
from services.generation import GenerationService
from utils.logger import app_logger

PROXY_PATH = "/api"

router = APIRouter()


@router.post(PROXY_PATH)
async def proxy(request: ProxyRequest):
    """Forward a prompt to the provider that owns the requested model, without fallback."""
    try:
        result = await GenerationService().proxy(request.prompt, request.model)
    except ProviderError as e:
        app_logger.error(f"Proxy error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return {"response": result.content}
