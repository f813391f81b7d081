"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Chat request from client."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="User message; the first message of a session is the user's ID")
    session_id: str = Field(..., alias="sessionId", description="Survey session identifier")


class ChatResponse(BaseModel):
    """Chat response to client."""

    reply: str = Field(..., description="Bot reply")


class ErrorResponse(BaseModel):
    """Error body returned with 500 responses."""

    error: str = Field(..., description="Generic error message")
