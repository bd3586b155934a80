from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROTOCOL_VERSION = "bedrock-2023-05-31"
MAX_TOKENS = 512
TEMPERATURE = 0.7


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str

    @field_validator("message", mode="before")
    @classmethod
    def _require_text(cls, value: object) -> object:
        # Reject non-strings before pydantic gets a chance to coerce them.
        if not isinstance(value, str) or not value.strip():
            raise ValueError("message must be a non-empty string")
        return value


class ChatResponse(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class InferencePayload(BaseModel):
    """Request body sent to the hosted model, in the Anthropic messages format."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(
        default=PROTOCOL_VERSION, serialization_alias="anthropic_version"
    )
    max_tokens: int = MAX_TOKENS
    temperature: float = TEMPERATURE
    system_prompt: str = Field(serialization_alias="system")
    messages: list[ChatMessage] = Field(default_factory=list)

    @classmethod
    def for_message(cls, message: str, system_prompt: str) -> "InferencePayload":
        return cls(
            system_prompt=system_prompt,
            messages=[ChatMessage(role="user", content=message)],
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class LambdaResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    def to_event(self) -> dict:
        return self.model_dump(by_alias=True)
