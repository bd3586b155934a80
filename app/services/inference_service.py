from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import boto3
from google import genai
from google.genai import types

from app.core.settings import Settings, get_settings
from app.models.chat import InferencePayload

logger = logging.getLogger(__name__)


class InferenceService(Protocol):
    def invoke(self, payload: InferencePayload) -> dict[str, Any]:
        """Run one inference call and return the structured reply.

        The reply follows the messages API shape: a ``content`` list whose
        items carry a ``text`` field.
        """
        ...


class BedrockInferenceService:
    def __init__(self, settings: Settings | None = None, client: Any = None):
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "bedrock-runtime", region_name=self._settings.aws_region
            )
        return self._client

    def invoke(self, payload: InferencePayload) -> dict[str, Any]:
        try:
            response = self._get_client().invoke_model(
                modelId=self._settings.model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(payload.to_wire()),
            )
            return json.loads(response["body"].read())
        except Exception:
            logger.exception("Bedrock request failed (model=%s)", self._settings.model_id)
            raise


class GeminiInferenceService:
    def __init__(self, settings: Settings | None = None, client: Any = None):
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._settings.gemini_api_key:
                raise RuntimeError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self._settings.gemini_api_key)
        return self._client

    def invoke(self, payload: InferencePayload) -> dict[str, Any]:
        contents = [
            types.Content(
                # Gemini calls the assistant side "model".
                role="model" if msg.role == "assistant" else "user",
                parts=[types.Part.from_text(text=msg.content)],
            )
            for msg in payload.messages
        ]
        config = types.GenerateContentConfig(
            system_instruction=payload.system_prompt,
            max_output_tokens=payload.max_tokens,
            temperature=payload.temperature,
        )

        try:
            response = self._get_client().models.generate_content(
                model=self._settings.gemini_model,
                contents=contents,
                config=config,
            )
        except Exception:
            logger.exception("Gemini request failed")
            raise

        text = getattr(response, "text", None)
        if isinstance(text, str) and text.strip():
            return {"content": [{"type": "text", "text": text}]}
        return {"content": []}
