"""FastAPI app serving the same chat handler as the Lambda entrypoint.

Run locally with ``python -m app.main`` (needs the ``serve`` extra).
"""
from fastapi import FastAPI

from app.api import chat, health
from app.core.logging import configure_logging
from app.core.settings import get_settings


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name)
    app.include_router(chat.router)
    app.include_router(health.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
