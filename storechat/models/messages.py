"""
Chat message contract shared by the backend and the widget.

Every message carries a ``type`` discriminator and an opaque ``id``. Field
names go over the wire in camelCase (``imageUrl``, ``originalPrice``...).
"""
import logging
import random
import string
import time
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_message_id(rng: random.Random | None = None) -> str:
    """Timestamp plus a random base-36 suffix. Unique in practice, not guaranteed."""
    rng = rng or random
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f"msg_{int(time.time() * 1000)}_{suffix}"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Message parts ---

class ProductAction(WireModel):
    label: str
    value: str
    url: str | None = None


class ActionOption(WireModel):
    label: str
    value: str


# --- Message variants ---

class TextMessage(WireModel):
    type: Literal["text"] = "text"
    id: str = Field(default_factory=new_message_id)
    content: str


class ProductMessage(WireModel):
    type: Literal["product"] = "product"
    id: str = Field(default_factory=new_message_id)
    title: str
    description: str
    price: float
    image_url: str
    actions: list[ProductAction]
    rating: float | None = None
    original_price: float | None = None
    in_stock: bool | None = None
    shipping: str | None = None


class ActionMessage(WireModel):
    type: Literal["action"] = "action"
    id: str = Field(default_factory=new_message_id)
    question: str
    options: list[ActionOption]


class ImageMessage(WireModel):
    type: Literal["image"] = "image"
    id: str = Field(default_factory=new_message_id)
    image_url: str
    caption: str | None = None


ChatMessage = Annotated[
    Union[TextMessage, ProductMessage, ActionMessage, ImageMessage],
    Field(discriminator="type"),
]

MESSAGE_TYPES = ("text", "product", "action", "image")


class UnknownMessage(WireModel):
    """Placeholder for a message the client cannot interpret."""

    type: str
    id: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


_chat_message_adapter = TypeAdapter(ChatMessage)


def parse_message(data: dict[str, Any]) -> TextMessage | ProductMessage | ActionMessage | ImageMessage | UnknownMessage:
    """Parse one wire message, degrading anything unrecognised to UnknownMessage."""
    msg_type = data.get("type")
    if msg_type in MESSAGE_TYPES:
        try:
            return _chat_message_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning("Malformed %s message %s: %s", msg_type, data.get("id"), e.errors())
    return UnknownMessage(type=str(msg_type), id=data.get("id"), raw=data)


def discount_percent(message: ProductMessage) -> int:
    if not message.original_price:
        return 0
    return round((message.original_price - message.price) / message.original_price * 100)
