"""ChatBRO — request/response models."""

from typing import List, Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    # Optional so that missing/empty fields reach the dispatcher's own checks
    message: Optional[str] = None
    model: Optional[str] = None


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str


class KeysUpdate(BaseModel):
    openai: Optional[str] = None
    anthropic: Optional[str] = None
    google: Optional[str] = None
    cohere: Optional[str] = None


class UpdateKeysResponse(BaseModel):
    success: bool
    message: str


class KeyStatusResponse(BaseModel):
    openai: bool
    anthropic: bool
    google: bool
    cohere: bool


class RootResponse(BaseModel):
    app: str
    version: str
    status: str
    docs: str
    providers: List[str]


class HealthResponse(BaseModel):
    status: str
    service: str
