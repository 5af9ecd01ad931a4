"""
    Authentication Endpoints

    Opaque bearer tokens are stored in the authentications table and expire
    30 days after their last use at login.

    Endpoints:
    - POST /: Signs in with username and password and returns the token.
    - DELETE /: Signs out, deleting the presented token.
    - POST /register: Creates an account (or restores an archived one) with a batch of backup codes.
    - DELETE /register: Closes the current account.
    - POST /recover: Signs in with a single-use backup code.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db, get_verified_token
from teamtasks.api.response import failure_as, success
from teamtasks.api.token import VerifiedToken
from teamtasks.core.errors import ApiError, AuthenticationError, BackupCodeError, UserError
from teamtasks.core.security import generate_backup_codes, get_password_hash, verify_password
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import (
    delete_resources,
    find_one,
    find_one_unarchived,
    insert_resource,
    restore_resource,
)
from teamtasks.logging import get_logger
from teamtasks.models.authentication import Authentication
from teamtasks.models.backup_code import BackupCode
from teamtasks.models.user import User
from teamtasks.schemas.authentication import (
    AuthenticationOut,
    LoginRequest,
    RecoverRequest,
    RegistrationOut,
)
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.user import UserOut, UserRegister
from teamtasks.services.authentication import start_session

router = APIRouter()
logger = get_logger(__name__)


async def _find_user_by_username(db: AsyncSession, username: str) -> User:
    try:
        return await find_one_unarchived(db, User, [("username", username)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, AuthenticationError.UserNotFound)


async def _issue_backup_codes(db: AsyncSession, user: User) -> List[str]:
    codes = await generate_backup_codes(db)
    for code in codes:
        await insert_resource(db, BackupCode, [("code", code), ("user_id", user.id)])
    return codes


@router.post("/", response_model=ApiResponse[AuthenticationOut])
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await _find_user_by_username(db, credentials.username)
    if not verify_password(credentials.password, user.password_hash):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, AuthenticationError.InvalidCredentials)

    with failure_as(AuthenticationError.SessionCreationFailed, user_id=user.id):
        authentication = await start_session(db, user)

    logger.info("User signed in", user_id=user.id)
    return success(AuthenticationOut.model_validate(authentication), "Login successful")


@router.delete("/", response_model=ApiResponse[None])
async def logout(
    token: VerifiedToken = Depends(get_verified_token),
    db: AsyncSession = Depends(get_db),
):
    with failure_as(AuthenticationError.SessionDeletionFailed, user_id=token.user_id):
        await delete_resources(db, Authentication, [("token", token.raw_token)])
    return success(None, "Logout successful")


@router.post("/register", response_model=ApiResponse[RegistrationOut], status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserRegister,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user.

    An archived account with the same username is restored when the
    password matches; a live one is a conflict.
    """
    try:
        existing = await find_one(db, User, [("username", user_in.username)])
    except ResourceNotFoundError:
        existing = None

    if existing is not None:
        if existing.archived_at is None or not verify_password(user_in.password, existing.password_hash):
            raise ApiError(status.HTTP_400_BAD_REQUEST, UserError.UserAlreadyExists)

        with failure_as(AuthenticationError.RegistrationFailed, user_id=existing.id):
            user = await restore_resource(db, User, existing.id)
            codes = await _issue_backup_codes(db, user)
        response.status_code = status.HTTP_200_OK
        logger.info("User restored", user_id=user.id)
        return success(RegistrationOut(user=UserOut.model_validate(user), backup_codes=codes), "Account restored")

    with failure_as(AuthenticationError.RegistrationFailed, username=user_in.username):
        user = await insert_resource(db, User, [
            ("first_name", user_in.first_name),
            ("last_name", user_in.last_name),
            ("username", user_in.username),
            ("password_hash", get_password_hash(user_in.password)),
        ])
        codes = await _issue_backup_codes(db, user)

    logger.great("New user registered", user_id=user.id)
    return success(RegistrationOut(user=UserOut.model_validate(user), backup_codes=codes), "Registration successful")


@router.delete("/register", response_model=ApiResponse[None])
async def unregister(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Close the account: sign out everywhere, archive the backup codes and the
    user. The steps are committed one by one.
    """
    with failure_as(UserError.UserDeletionFailed, user_id=current_user.id):
        await delete_resources(db, Authentication, [("user_id", current_user.id)])
        await delete_resources(db, BackupCode, [("user_id", current_user.id)])
        await delete_resources(db, User, [("id", current_user.id)])

    logger.info("User unregistered", user_id=current_user.id)
    return success(None, "Account deleted")


@router.post("/recover", response_model=ApiResponse[AuthenticationOut])
async def recover(payload: RecoverRequest, db: AsyncSession = Depends(get_db)):
    """Sign in with a backup code; the code cannot be used again."""
    user = await _find_user_by_username(db, payload.username)
    try:
        backup_code = await find_one_unarchived(
            db, BackupCode, [("code", payload.code), ("user_id", user.id)]
        )
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, BackupCodeError.CodeNotFound)

    with failure_as(AuthenticationError.SessionCreationFailed, user_id=user.id):
        await delete_resources(db, BackupCode, [("id", backup_code.id)])
        authentication = await start_session(db, user)

    logger.warning("User signed in with a backup code", user_id=user.id)
    return success(AuthenticationOut.model_validate(authentication), "Login successful")
