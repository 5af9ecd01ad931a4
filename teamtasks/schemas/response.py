"""
Response envelope shared by every endpoint.
"""

from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """{"data": ..., "message": ..., "error": {"<Domain>": "<Variant>"} | null}"""
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[Dict[str, str]] = None
