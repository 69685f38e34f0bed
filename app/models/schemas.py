"""API request and response models."""
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(..., description="Question for the tutor")
    session_id: str | None = Field(None, description="Conversation session; omit for a new conversation")


class MessageOut(BaseModel):
    id: str = Field(..., description="Unique entry id")
    text: str = Field(..., description="Raw user input, or formatted markup for tutor replies")
    is_user: bool = Field(..., description="True for user entries, False for tutor replies")


class ChatResponse(BaseModel):
    reply: str = Field(..., description="Formatted tutor reply (markup), or an apology if the tutor failed")
    session_id: str = Field(..., description="Session id (use for follow-up messages)")
    messages: list[MessageOut] = Field(..., description="Entries added by this exchange: user, then tutor")


class SessionHistory(BaseModel):
    session_id: str
    messages: list[MessageOut] = Field(..., description="All entries of the session in order")
