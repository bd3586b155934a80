from __future__ import annotations

from functools import lru_cache

from app.core.settings import get_settings
from app.services.chat_handler import ChatHandler
from app.services.inference_service import (
    BedrockInferenceService,
    GeminiInferenceService,
    InferenceService,
)


@lru_cache
def get_inference_service() -> InferenceService:
    settings = get_settings()
    if settings.inference_provider == "bedrock":
        return BedrockInferenceService(settings=settings)
    if settings.inference_provider == "gemini":
        return GeminiInferenceService(settings=settings)
    raise RuntimeError(f"Unknown inference provider: {settings.inference_provider}")


@lru_cache
def get_chat_handler() -> ChatHandler:
    return ChatHandler(inference_service=get_inference_service(), settings=get_settings())
