import asyncio
import logging

from fastapi import APIRouter, Depends, Request, Response

from app.dependencies import get_chat_handler
from app.services.chat_handler import ChatHandler

logger = logging.getLogger(__name__)

router = APIRouter()


async def _dispatch(request: Request, handler: ChatHandler) -> Response:
    # Same event shape API Gateway hands to the Lambda entrypoint.
    raw = await request.body()
    event = {
        "httpMethod": request.method,
        "path": request.url.path,
        "body": raw.decode("utf-8", errors="replace") if raw else None,
        "isBase64Encoded": False,
    }
    result = await asyncio.to_thread(handler.handle, event)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


@router.post("/chat")
async def chat_endpoint(
    request: Request,
    handler: ChatHandler = Depends(get_chat_handler),
) -> Response:
    return await _dispatch(request, handler)


@router.options("/chat")
async def chat_preflight(
    request: Request,
    handler: ChatHandler = Depends(get_chat_handler),
) -> Response:
    return await _dispatch(request, handler)
