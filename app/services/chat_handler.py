from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.settings import Settings, get_settings
from app.models.chat import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    InferencePayload,
    LambdaResponse,
)
from app.services.inference_service import InferenceService

logger = logging.getLogger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


class InvalidBodyError(ValueError):
    pass


def _response(status_code: int, model: BaseModel | None = None) -> LambdaResponse:
    body = "" if model is None else json.dumps(model.model_dump(exclude_none=True))
    return LambdaResponse(status_code=status_code, headers=dict(CORS_HEADERS), body=body)


def event_method(event: dict[str, Any]) -> str:
    """Return the HTTP verb of a REST API (v1) or HTTP API (v2) proxy event."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or "").upper()


def event_body(event: dict[str, Any]) -> Any:
    body = event.get("body")
    if body is None:
        return {}
    if isinstance(body, (dict, list)):
        return body

    if not isinstance(body, (str, bytes)):
        raise InvalidBodyError(f"unsupported body type: {type(body).__name__}")

    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidBodyError(str(e)) from e

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        return {}

    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidBodyError(str(e)) from e


def extract_reply(result: Any) -> str | None:
    if not isinstance(result, dict):
        return None
    content = result.get("content")
    if not isinstance(content, list) or not content:
        return None
    first = content[0]
    if not isinstance(first, dict):
        return None
    text = first.get("text")
    return text if isinstance(text, str) and text else None


class ChatHandler:
    def __init__(self, inference_service: InferenceService, settings: Settings | None = None):
        self._inference = inference_service
        self._settings = settings or get_settings()

    def handle(self, event: dict[str, Any]) -> LambdaResponse:
        if event_method(event) == "OPTIONS":
            return _response(200)

        try:
            data = event_body(event)
        except InvalidBodyError as e:
            logger.warning("Rejected request with unparseable body: %s", e)
            return _response(400, ErrorResponse(error="Invalid JSON in request body"))

        try:
            request = ChatRequest.model_validate(data)
        except ValidationError:
            logger.warning("Rejected request without a message")
            return _response(400, ErrorResponse(error="Message is required"))

        payload = InferencePayload.for_message(
            request.message, self._settings.effective_system_prompt
        )

        try:
            result = self._inference.invoke(payload)
        except Exception as e:
            logger.exception("Inference call failed")
            details = str(e) or type(e).__name__
            return _response(
                500, ErrorResponse(error="Internal server error", details=details)
            )

        reply = extract_reply(result)
        if reply is None:
            logger.warning("Inference reply had no text segment")
            reply = self._settings.no_response_text

        logger.info("Chat reply generated (%d chars)", len(reply))
        return _response(200, ChatResponse(reply=reply))
