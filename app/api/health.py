from fastapi import APIRouter

from app.core.settings import get_settings

router = APIRouter()


@router.get("/")
def root_health_check() -> dict[str, str]:
    return {"status": "running", "service": get_settings().app_name}


@router.get("/health")
def health_check() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "environment": settings.environment,
        "provider": settings.inference_provider,
    }
