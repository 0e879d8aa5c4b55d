import logging
import random
from functools import lru_cache

from fastapi import Depends, Header

from storechat.config import Settings, settings
from storechat.errors import TokenError
from storechat.models.catalog import Catalog, load_catalog
from storechat.services.responder import ResponseEngine
from storechat.services.tokens import verify_token

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """Provide the settings to endpoint functions."""
    return settings


@lru_cache(maxsize=None)
def _catalog_for(path: str | None) -> Catalog:
    return load_catalog(path)


def get_catalog(app_settings: Settings = Depends(get_settings)) -> Catalog:
    """The catalog is loaded once per path and shared by every request."""
    return _catalog_for(app_settings.CATALOG_PATH)


def get_rng() -> random.Random:
    return random.Random()


def get_engine(
    catalog: Catalog = Depends(get_catalog),
    rng: random.Random = Depends(get_rng),
) -> ResponseEngine:
    return ResponseEngine(catalog, rng)


def require_token(
    authorization: str | None = Header(default=None),
    app_settings: Settings = Depends(get_settings),
) -> None:
    """Reject chat requests without a valid bearer token when REQUIRE_TOKEN is on."""
    if not app_settings.REQUIRE_TOKEN:
        return
    try:
        verify_token(authorization, app_settings.TOKEN_SECRET)
    except TokenError as e:
        logger.warning("Rejected chat request: %s", e.reason)
        raise
