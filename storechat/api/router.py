from fastapi import APIRouter
from storechat.api.chat import router as chat_router
from storechat.api.token import router as token_router

router = APIRouter()
router.include_router(token_router)
router.include_router(chat_router)
