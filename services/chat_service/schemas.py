from datetime import datetime

from pydantic import BaseModel, Field


class EnsureConversation(BaseModel):
    participant_a: str = Field(min_length=1)
    participant_b: str = Field(min_length=1)
    display_name_a: str = ""
    display_name_b: str = ""
    avatar_a: str = ""
    avatar_b: str = ""


class EnsureConversationResponse(BaseModel):
    conversation_id: str
    created: bool


class ConversationResponse(BaseModel):
    conversation_id: str
    participant_a: str
    participant_b: str
    display_name_a: str
    display_name_b: str
    avatar_a: str
    avatar_b: str
    created_at: datetime | None = None
