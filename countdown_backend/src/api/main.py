import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .rendering import RenderFailure, get_image_service
from .repositories import get_repository
from .routers import countdowns as countdowns_router
from .settings import get_settings

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "countdowns",
        "description": "CRUD operations for countdowns and their live PNG images.",
    },
]

app = FastAPI(
    title="Countdown Backend",
    description="Create countdowns and embed them anywhere as live-rendered PNG images.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Resolve fonts once at startup, outside the per-request path
get_image_service()


# Global exception handlers for consistent JSON on validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": _jsonable_errors(exc),
        },
    )


def _utf8_safe(value):
    # Echoed input may hold lone surrogates, which the UTF-8 response body cannot carry
    if isinstance(value, str):
        return value.encode("utf-8", "backslashreplace").decode("utf-8")
    if isinstance(value, dict):
        return {_utf8_safe(k): _utf8_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_utf8_safe(v) for v in value]
    return value


def _jsonable_errors(exc: RequestValidationError) -> list:
    # ValueError instances raised in validators sit in 'ctx' and are not JSON serializable
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(_utf8_safe(err))
    return errors


@app.exception_handler(RenderFailure)
async def render_failure_handler(request: Request, exc: RenderFailure) -> JSONResponse:
    """
    Map image rendering failures to a 500 JSON response.
    """
    logger.error("Image generation failed for %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "RenderFailure",
            "message": "Failed to generate countdown image",
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": get_repository().name}


# Include routers
app.include_router(countdowns_router.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=_settings.host, port=_settings.port)
