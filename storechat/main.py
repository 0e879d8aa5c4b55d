import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from storechat.config import settings
from storechat.dependencies import get_catalog
from storechat.errors import TokenError
from storechat.logging_setup import setup_logging
from storechat.models.schemas import ApiResponse, ErrorResponse
from storechat.api.router import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup: configure logging and load the catalog so a bad catalog file fails fast
    setup_logging(settings.LOG_LEVEL)
    catalog = get_catalog(settings)
    logger.info("Chat server ready with %d products", len(catalog))
    yield


app = FastAPI(
    title="Store Chat Widget Backend",
    description="Rule-based chat responses and product suggestions for the embeddable store chat widget.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Api-Key"],
)


# --- Error shapes ---

def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.warning("Error processing request to %s: %s", request.url.path, details)
    return _error(400, "Error processing request", details or None)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods both read as a missing endpoint to the widget.
    if exc.status_code in (404, 405):
        return _error(404, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(TokenError)
async def token_error_handler(request: Request, exc: TokenError):
    body = ApiResponse(success=False, error=exc.message)
    return JSONResponse(status_code=401, content=body.model_dump(exclude_none=True))


app.include_router(router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
