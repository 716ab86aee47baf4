"""
Route handlers for one-shot text, image and code generation.
Successful generations are recorded in the matching history list.
"""
from fastapi import APIRouter
from models.api_models import CodeRequest, ExplainRequest, ImageRequest, TextRequest
from models.provider_models import AllProvidersFailedError, GenerationResult
from services.generation import GenerationService
from services.history import GenerationHistory
from utils.constants import HistoryKind
from utils.logger import app_logger

router = APIRouter(prefix="/generate")


def send_generation_error(e: AllProvidersFailedError) -> dict:
    """Plain error payload surfaced in place of the output."""
    return {
        "error": "generation_failed",
        "capability": e.capability.value,
        "message": str(e),
    }


def _metadata(result: GenerationResult, options: dict, **extra) -> dict:
    return {**options, **extra, "provider": result.provider_name, "model": result.model}


@router.post("/text")
async def generate_text(request: TextRequest):
    options = request.options.as_payload_options()
    try:
        result = await GenerationService().generate_text(request.prompt, options, text_type=request.type)
    except AllProvidersFailedError as e:
        app_logger.error(f"Text generation error: {e}")
        return send_generation_error(e)

    GenerationHistory(HistoryKind.TEXT).add(
        request.prompt,
        result.content,
        _metadata(result, options, type=request.type)
    )
    return result.to_dict()


@router.post("/image")
async def generate_image(request: ImageRequest):
    options = request.options.as_payload_options()
    try:
        result = await GenerationService().generate_image(request.prompt, options)
    except AllProvidersFailedError as e:
        app_logger.error(f"Image generation failed: {e}")
        return send_generation_error(e)

    GenerationHistory(HistoryKind.IMAGE).add(request.prompt, result.url, _metadata(result, options))
    return result.to_dict()


@router.post("/code")
async def generate_code(request: CodeRequest):
    options = request.options.as_payload_options()
    try:
        result = await GenerationService().generate_code(request.prompt, request.language, options)
    except AllProvidersFailedError as e:
        app_logger.error(f"Error generating code: {e}")
        return send_generation_error(e)

    GenerationHistory(HistoryKind.CODE).add(
        request.prompt,
        result.content,
        _metadata(result, options, language=request.language, explanation=None)
    )
    return result.to_dict()


@router.post("/explain")
async def explain_code(request: ExplainRequest):
    options = request.options.as_payload_options()
    try:
        result = await GenerationService().explain_code(request.code, request.language, options)
    except AllProvidersFailedError as e:
        app_logger.error(f"Error explaining code: {e}")
        return send_generation_error(e)

    GenerationHistory(HistoryKind.CODE).add(
        request.prompt or "",
        request.code,
        _metadata(result, options, language=request.language, explanation=result.content)
    )
    return result.to_dict()
