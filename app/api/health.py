from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "ok"
    app: str
    environment: str


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Liveness only; the upstream backend is not contacted."""
    return HealthResponse(app=settings.APP_NAME, environment=settings.ENVIRONMENT)
