import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from storechat.config import Settings
from storechat.dependencies import get_settings
from storechat.models.schemas import ApiResponse, TokenData
from storechat.services.tokens import issue_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/token", tags=["token"])


def api_key_is_valid(api_key: str | None, app_settings: Settings) -> bool:
    # Development accepts any key so the widget can run against a local server.
    if app_settings.is_development:
        return True
    return bool(api_key) and api_key == app_settings.API_KEY


@router.post("", response_model=ApiResponse, response_model_exclude_none=True)
async def create_token(
    x_api_key: str | None = Header(default=None),
    app_settings: Settings = Depends(get_settings),
):
    if not api_key_is_valid(x_api_key, app_settings):
        logger.warning("Token request with invalid or missing API key")
        body = ApiResponse(success=False, error="Invalid or missing API key")
        return JSONResponse(status_code=401, content=body.model_dump(exclude_none=True))

    token = issue_token(x_api_key or "", app_settings.TOKEN_SECRET, app_settings.TOKEN_TTL_SECONDS)
    return ApiResponse(success=True, data=TokenData(token=token))
