import asyncio
import logging
import random

from fastapi import APIRouter, Depends

from storechat.config import Settings
from storechat.dependencies import get_engine, get_rng, get_settings, require_token
from storechat.models.schemas import ChatRequest, ChatResponse
from storechat.services.responder import ResponseEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"], dependencies=[Depends(require_token)])


async def simulate_latency(app_settings: Settings, rng: random.Random):
    """Sleep for a random delay in the configured window. A zero window disables it."""
    high = max(app_settings.RESPONSE_DELAY_MIN_MS, app_settings.RESPONSE_DELAY_MAX_MS)
    if high <= 0:
        return
    delay_ms = rng.uniform(app_settings.RESPONSE_DELAY_MIN_MS, high)
    await asyncio.sleep(delay_ms / 1000)


@router.get("/init", response_model=ChatResponse, response_model_exclude_none=True)
async def init_chat(engine: ResponseEngine = Depends(get_engine)):
    return ChatResponse(messages=engine.welcome())


@router.post("/message", response_model=ChatResponse, response_model_exclude_none=True)
async def post_message(
    body: ChatRequest,
    engine: ResponseEngine = Depends(get_engine),
    app_settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_rng),
):
    logger.info("Received message from client: action=%r message=%r", body.action, body.message)
    await simulate_latency(app_settings, rng)
    return ChatResponse(messages=engine.respond(action=body.action, message=body.message))
