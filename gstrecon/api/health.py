from fastapi import APIRouter
from gstrecon.core.config import settings

router = APIRouter()

@router.get("/health")
async def health():
    return {"status": "ok", "service": settings.PROJECT_NAME}
