"""
Wayne AI Gateway - FastAPI application fronting Gemini, OpenAI and Stability AI.
Chat, text, image and code generation with priority-ordered provider fallback
and persisted generation history.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import chat, generate, history_route, proxy, status_route
from auth import APIKeyMiddleware
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with user-friendly messages"""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}: {errors}")

    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    first_error = errors[0]
    error_type = first_error.get('type', '')
    loc = first_error.get('loc') or []
    field = loc[-1] if loc else 'field'

    if error_type == 'string_too_long':
        max_length = first_error.get('ctx', {}).get('max_length', 'unknown')
        current_length = len(first_error.get('input', ''))
        message = f"Field '{field}' exceeds maximum length of {max_length} characters (current: {current_length})"
    else:
        message = f"{field}: {first_error.get('msg', 'Validation error')}"

    # worker clients only understand {response} or a 500 {error}
    if request.url.path == proxy.PROXY_PATH:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": message},
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [{
                "msg": message,
                "type": error_type,
                "loc": list(loc)
            }]
        },
    )


def create_app() -> FastAPI:
    """Build the application with middleware and routers."""
    app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(APIKeyMiddleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/")
    async def root():
        """Root endpoint - health check."""
        return {"message": "Wayne AI Gateway is running"}

    app.include_router(status_route.router, tags=["status"])
    app.include_router(proxy.router, tags=["proxy"])
    app.include_router(chat.router, tags=["chat"])
    app.include_router(generate.router, tags=["generate"])
    app.include_router(history_route.router, tags=["history"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
