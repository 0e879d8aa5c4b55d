import logging
import math

import httpx

from storechat.models.messages import (
    ActionMessage,
    ImageMessage,
    ProductMessage,
    TextMessage,
    UnknownMessage,
    discount_percent,
    parse_message,
)

logger = logging.getLogger(__name__)

WELCOME_FALLBACK = "Hi! How can I help you today?"
ERROR_FALLBACK = "Sorry, I couldn't process your message. Please try again."


class ChatWidgetClient:
    """Talks to the chat backend the way the embedded widget does."""

    def __init__(self, base_url: str, api_key: str | None = None, http_client: httpx.AsyncClient | None = None):
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=15.0)
        self.api_key = api_key
        self.token: str | None = None

    # -- Low-level helpers --

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _parse_messages(data: dict) -> list | None:
        raw = data.get("messages") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            return None
        return [parse_message(m) if isinstance(m, dict) else UnknownMessage(type="invalid") for m in raw]

    # -- Protocol --

    async def fetch_token(self) -> str:
        """Exchange the public API key for a short-lived bearer token."""
        response = await self._client.post("/api/token", headers={"X-Api-Key": self.api_key or ""})
        response.raise_for_status()
        self.token = response.json()["data"]["token"]
        return self.token

    async def init(self) -> list:
        """Load the welcome sequence, falling back to a plain greeting."""
        response = await self._client.get("/api/chat/init", headers=self._headers())
        response.raise_for_status()
        messages = self._parse_messages(response.json())
        if messages is None:
            return [TextMessage(content=WELCOME_FALLBACK)]
        return messages

    async def send(self, payload: dict) -> list:
        try:
            response = await self._client.post("/api/chat/message", headers=self._headers(), json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error in server communication: %s", e)
            return [TextMessage(content=ERROR_FALLBACK)]
        return self._parse_messages(data) or []

    async def send_action(self, value: str) -> list:
        return await self.send({"action": value})

    async def send_message(self, text: str) -> list:
        return await self.send({"message": text})

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()


# -- Plain-text rendering --

def format_price(price: float) -> str:
    return f"${price:.2f}"


def rating_stars(rating: float) -> str:
    """Five-star bar with the rating rounded to the nearest half."""
    rounded = round(rating * 2) / 2
    full = math.floor(rounded)
    half = "½" if rounded % 1 else ""
    empty = 5 - math.ceil(rounded)
    return "★" * full + half + "☆" * empty + f" {rating:.1f}"


def render_text(message) -> str:
    if isinstance(message, TextMessage):
        return message.content

    if isinstance(message, ProductMessage):
        price = format_price(message.price)
        if message.original_price:
            price += f" (was {format_price(message.original_price)})"
        discount = discount_percent(message)
        if discount > 0:
            price += f" -{discount}%"
        lines = [message.title]
        if message.rating:
            lines.append(rating_stars(message.rating))
        lines += [message.description, price]
        if message.shipping:
            lines.append(message.shipping)
        if message.in_stock is False:
            lines.append("Out of Stock")
        lines.append(" | ".join(f"[{a.label}]" for a in message.actions))
        return "\n".join(lines)

    if isinstance(message, ActionMessage):
        options = [f"  {i}. {o.label}" for i, o in enumerate(message.options, start=1)]
        return "\n".join([message.question] + options)

    if isinstance(message, ImageMessage):
        return f"[image] {message.image_url}" + (f"\n{message.caption}" if message.caption else "")

    return "Unknown message type."
