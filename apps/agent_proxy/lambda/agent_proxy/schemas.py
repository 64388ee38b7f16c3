"""Pydantic schemas for the agent proxy."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    FinishReason,
    HealthState,
    Role,
)
from .errors import BadRequestError

MESSAGES_REQUIRED = "Messages array is required"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    messages: list[ChatMessage]
    model: str | None = None
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0, le=2)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, alias="maxTokens", ge=1)
    top_p: float | None = Field(default=None, alias="topP", ge=0, le=1)
    stream: bool = False

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, messages: list[ChatMessage]) -> list[ChatMessage]:
        if not messages:
            raise ValueError(MESSAGES_REQUIRED)
        return messages

    @field_validator("model")
    @classmethod
    def blank_model_means_default(cls, model: str | None) -> str | None:
        if model is not None and not model.strip():
            return None
        return model

    def last_user_message(self) -> str:
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return self.messages[-1].content


class Usage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0, serialization_alias="promptTokens")
    completion_tokens: int = Field(default=0, ge=0, serialization_alias="completionTokens")
    total_tokens: int = Field(default=0, ge=0, serialization_alias="totalTokens")


class ChatResponse(BaseModel):
    id: str
    content: str
    model: str
    usage: Usage
    finish_reason: FinishReason = Field(default="stop", serialization_alias="finishReason")
    processing_time_ms: int = Field(default=0, ge=0, serialization_alias="processingTime")
    selected_provider: str | None = Field(default=None, serialization_alias="selectedProvider")
    fallback: bool | None = None
    fallback_to_local: bool | None = Field(default=None, serialization_alias="fallbackToLocal")
    original_error: str | None = Field(default=None, serialization_alias="originalError")

    def to_envelope(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProxyRequest(BaseModel):
    provider: str | None = None
    payload: ChatRequest

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, provider: Any) -> Any:
        if isinstance(provider, str):
            provider = provider.strip().lower()
            return provider or None
        return provider


class HealthStatus(BaseModel):
    provider: str
    status: HealthState
    timestamp: str
    capabilities: list[str]


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"].removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def parse_proxy_body(body: Any) -> ProxyRequest:
    """Normalize both inbound body shapes into one ProxyRequest.

    The browser client sends ``{provider, payload: {...}}``; older callers send
    the chat fields at the top level next to ``provider``.
    """
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")

    payload = body.get("payload")
    if not isinstance(payload, dict):
        payload = {key: value for key, value in body.items() if key != "provider"}

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise BadRequestError(MESSAGES_REQUIRED)

    try:
        return ProxyRequest.model_validate({"provider": body.get("provider"), "payload": payload})
    except ValidationError as e:
        raise BadRequestError(_describe_validation_error(e)) from e
