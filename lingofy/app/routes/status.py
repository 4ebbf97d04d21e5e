"""
Status Routes.

- GET /api/v1/test → API liveness message for the client header
"""

from fastapi import APIRouter

from lingofy.domain.constants import API_STATUS_MESSAGE

api_router = APIRouter()


@api_router.get("/test")
async def api_test() -> dict[str, str]:
    """Liveness message."""
    return {"message": API_STATUS_MESSAGE}
