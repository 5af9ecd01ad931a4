"""
Envelope helpers and the exception handlers that render errors in it.
"""

from contextlib import contextmanager
from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from teamtasks.core.errors import ApiError, DomainError
from teamtasks.core.logging import capture_error
from teamtasks.db.exceptions import DatabaseError, ResourceNotFoundError
from teamtasks.logging import get_logger
from teamtasks.schemas.response import ApiResponse

logger = get_logger(__name__)


def success(data: Any = None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(data=data, message=message)


def error_body(message: str, error: Optional[dict] = None) -> dict:
    return jsonable_encoder(ApiResponse(data=None, message=message, error=error))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error.to_dict()),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    capture_error(exc, context={"request": {"method": request.method, "path": request.url.path}})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal Server Error", {"Server": "InternalServerError"}),
    )


@contextmanager
def failure_as(error: DomainError, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR, **context: Any):
    """
    Translate database failures inside the block into an ApiError.

    Not-found lookups are left alone so callers can map them to a 404.

    Usage:
        with failure_as(TeamError.TeamCreationFailed, owner_id=user.id):
            team = await insert_resource(db, Team, pairs)
    """
    try:
        yield
    except ResourceNotFoundError:
        raise
    except DatabaseError as e:
        logger.error(error.message, exc_info=False, error_detail=str(e), **context)
        raise ApiError(status_code, error) from e
