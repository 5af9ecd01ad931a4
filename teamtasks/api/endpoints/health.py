from fastapi import APIRouter

from teamtasks.schemas.response import ApiResponse

router = APIRouter()


@router.get("/", response_model=ApiResponse[dict])
@router.get("/health", response_model=ApiResponse[dict])
def health():
    """Liveness probe; does not touch the database"""
    return ApiResponse(data={"status": "ok"}, message="Service is up")
