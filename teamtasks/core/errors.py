"""
Domain errors returned to API clients.

Each enum member's name is the variant reported in the response envelope
and its value is the human readable message:

    raise ApiError(404, TeamError.TeamNotFound)
    # -> {"data": null, "message": "Team not found", "error": {"TeamError": "TeamNotFound"}}
"""

from enum import Enum
from typing import Dict, Optional


class DomainError(Enum):
    @property
    def domain(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return self.value

    def to_dict(self) -> Dict[str, str]:
        return {self.domain: self.name}


class AuthenticationError(DomainError):
    UserNotFound = "User not found"
    InvalidCredentials = "Invalid credentials"
    SessionCreationFailed = "Session creation failed"
    SessionDeletionFailed = "Session deletion failed"
    InvalidToken = "Invalid token"
    TokenExpired = "Token expired"
    RegistrationFailed = "Registration failed"


class UserError(DomainError):
    UserNotFound = "User not found"
    UserAlreadyExists = "User already exists"
    UserUpdateFailed = "User update failed"
    UserDeletionFailed = "User deletion failed"


class TeamError(DomainError):
    TeamNotFound = "Team not found"
    TeamAccessDenied = "Team access denied"
    TeamCreationFailed = "Team creation failed"
    TeamUpdateFailed = "Team update failed"
    TeamDeletionFailed = "Team deletion failed"
    TeamUserCreationFailed = "Team user creation failed"
    TeamUserDeletionFailed = "Team user deletion failed"


class InvitationError(DomainError):
    InvitationNotFound = "Invitation not found"
    InvitationAlreadyExists = "Invitation already exists"
    InvitationCreationFailed = "Invitation creation failed"
    InvitationUpdateFailed = "Invitation update failed"
    InvitationDeletionFailed = "Invitation deletion failed"


class ActivityError(DomainError):
    ActivityNotFound = "Activity not found"
    ActivityAccessDenied = "Activity is assigned to another user"
    ActivityNotAssigned = "Activity is not assigned"
    ActivityNotStarted = "Activity not started"
    ActivityAlreadyEnded = "Activity already ended"
    ActivityAlreadyPaused = "Activity already paused"
    ActivityNotPaused = "Activity not paused"
    ActivityNotEnded = "Activity not ended"
    AssigneeNotMember = "Assignee is not a member of the team"
    ActivityCreationFailed = "Activity creation failed"
    ActivityUpdateFailed = "Activity update failed"
    ActivityDeletionFailed = "Activity deletion failed"


class BackupCodeError(DomainError):
    CodeNotFound = "Code not found"
    CodeCreationFailed = "Code creation failed"
    CodeDeletionFailed = "Code deletion failed"


class UserSkillError(DomainError):
    UserSkillNotFound = "User skill not found"
    UserSkillCreationFailed = "User skill creation failed"
    UserSkillUpdateFailed = "User skill update failed"
    UserSkillDeletionFailed = "User skill deletion failed"


class ApiError(Exception):
    """
    Raised from handlers and dependencies; rendered as the error envelope
    by the application's exception handler.
    """

    def __init__(self, status_code: int, error: DomainError, message: Optional[str] = None):
        self.status_code = status_code
        self.error = error
        self.message = message or error.message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ApiError({self.status_code}, {self.error.domain}.{self.error.name})"
