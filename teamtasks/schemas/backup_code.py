from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BackupCodeOut(BaseModel):
    id: str
    code: str
    created_at: datetime
    archived_at: Optional[datetime] = None

    class Config:
        from_attributes = True
