"""AWS Lambda entrypoint.

Configure the function handler as ``app.lambda_function.lambda_handler``.
The handler and its model client are built on the first invocation and
reused while the execution environment stays warm.
"""
from __future__ import annotations

import logging
from typing import Any

from app.core.logging import configure_logging
from app.core.settings import get_settings
from app.dependencies import get_chat_handler

configure_logging(get_settings())

logger = logging.getLogger(__name__)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    logger.debug(
        "Invocation %s", getattr(context, "aws_request_id", None) or "<local>"
    )
    return get_chat_handler().handle(event or {}).to_event()
