"""
Pydantic data models for API requests.
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field


class GenerationOptions(BaseModel):
    """Free-form generation knobs. Unset values fall back to provider defaults."""
    model: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    # image options
    size: Optional[str] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    steps: Optional[int] = Field(None, gt=0)
    cfg_scale: Optional[float] = None
    engine: Optional[str] = None
    style: Optional[str] = None

    def as_payload_options(self) -> dict:
        return self.model_dump(exclude_none=True)


class ProxyRequest(BaseModel):
    """Worker-compatible request body for POST /api."""
    prompt: str = Field(..., min_length=1)
    model: Optional[str] = None


class ChatRequest(BaseModel):
    """Chat turn; history is kept server-side per session."""
    message: str = Field(..., min_length=1, max_length=8000)
    session_id: Optional[str] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class SaveConversationRequest(BaseModel):
    """Archive the current session's conversation."""
    session_id: Optional[str] = None
    chat_id: Optional[str] = None
    model: Optional[str] = None


class TextRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=8000)
    type: Optional[Literal["article", "summary", "story", "poem", "email"]] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class ImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=2000)
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class CodeRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=8000)
    language: str = Field("python", min_length=1)
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class ExplainRequest(BaseModel):
    code: str = Field(..., min_length=1)
    prompt: Optional[str] = None  # description the code was generated from, kept in history
    language: str = Field("python", min_length=1)
    options: GenerationOptions = Field(default_factory=GenerationOptions)
