"""
Password hashing, bearer tokens and backup codes.
"""

import hashlib
import secrets
import time
from typing import List, Optional

import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.core.config import settings
from teamtasks.db.queries import find_all
from teamtasks.models.backup_code import BackupCode

ROUNDS = 12
TOKEN_BYTES = 32
CODE_BYTES = 7


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Returns False for a malformed hash instead of raising."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def generate_token() -> str:
    """Opaque bearer token handed out at login."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def generate_code(timestamp: Optional[int] = None) -> str:
    """
    14 hex characters: the first 7 bytes of
    SHA-256(<unix timestamp><6 random digits>).
    """
    if timestamp is None:
        timestamp = int(time.time())
    digits = f"{secrets.randbelow(1_000_000):06d}"
    digest = hashlib.sha256(f"{timestamp}{digits}".encode("utf-8")).digest()
    return digest[:CODE_BYTES].hex()


async def generate_backup_codes(db: AsyncSession, count: Optional[int] = None) -> List[str]:
    """
    Codes that collide neither with each other nor with any stored backup
    code, archived ones included.
    """
    count = settings.BACKUP_CODE_COUNT if count is None else count
    codes: List[str] = []
    while len(codes) < count:
        code = generate_code()
        if code in codes:
            continue
        if await find_all(db, BackupCode, [("code", code)]):
            continue
        codes.append(code)
    return codes
