import time

from pydantic import BaseModel, Field

from storechat.models.messages import ChatMessage


# --- Chat schemas ---

class ChatRequest(BaseModel):
    action: str | None = None
    message: str | None = None


class ChatResponse(BaseModel):
    messages: list[ChatMessage]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


# --- Token schemas ---

def _now_ms() -> int:
    return int(time.time() * 1000)


class ResponseMeta(BaseModel):
    timestamp: int = Field(default_factory=_now_ms)


class TokenData(BaseModel):
    token: str


class ApiResponse(BaseModel):
    success: bool
    data: TokenData | None = None
    error: str | None = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)
