"""Chat message models."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Sender(str, Enum):
    """Author of a chat message."""

    USER = "user"
    BOT = "bot"


class ChatMessage(BaseModel):
    """One turn in a user's conversation log."""

    id: Optional[str] = None
    text: str
    sender: Sender = Sender.USER
    created_at: datetime
    user_id: str


class ChatMessageCreate(BaseModel):
    """Chat message before the store assigns id and created_at."""

    text: str
    sender: Sender = Sender.USER
    user_id: str
    created_at: Optional[datetime] = None


class ChatRequest(BaseModel):
    """Inbound chat message from a client."""

    text: str = Field(..., min_length=1, description="Message text")


class ChatResponse(BaseModel):
    """The stored user message and the assistant's reply."""

    user_message: ChatMessage
    bot_message: ChatMessage
