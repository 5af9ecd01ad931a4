from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teamtasks.api.endpoints import auth, health, invitations, teams, users
from teamtasks.api.endpoints.my import activities as my_activities
from teamtasks.api.endpoints.my import backup_codes as my_backup_codes
from teamtasks.api.endpoints.my import invitations as my_invitations
from teamtasks.api.endpoints.my import skills as my_skills
from teamtasks.api.endpoints.my import teams as my_teams
from teamtasks.api.endpoints.my import user as my_user
from teamtasks.api.response import api_error_handler, unhandled_error_handler
from teamtasks.core.config import settings
from teamtasks.core.errors import ApiError
from teamtasks.core.logging import init_sentry, setup_logging
from teamtasks.db.base import Base
from teamtasks.db.session import engine
from teamtasks.helpers.getters import isDebugMode, isTestMode
from teamtasks.middleware.logging import AccessLoggingMiddleware

# Initialize logging and error tracking
setup_logging()
init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests create the schema on their own engine
    if not isTestMode():
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title="Teamtasks API",
    description="""
## Authentication

Sign in with `POST /api/auth` (or register with `POST /api/auth/register`
first) and send the returned token as `Authorization: Bearer <token>`.
Tokens expire 30 days after the last sign-in.

## Responses

Every response uses the same envelope:

    {"data": ..., "message": "...", "error": null}

Errors carry the domain and variant, e.g. `{"TeamError": "TeamNotFound"}`.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Access logging is disabled in debug mode
app.add_middleware(AccessLoggingMiddleware, enabled=not isDebugMode())

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(my_user.router, prefix="/api/my", tags=["me"])
app.include_router(my_skills.router, prefix="/api/my", tags=["me"])
app.include_router(my_backup_codes.router, prefix="/api/my", tags=["me"])
app.include_router(my_teams.router, prefix="/api/my", tags=["my teams"])
app.include_router(my_activities.router, prefix="/api/my", tags=["my activities"])
app.include_router(my_invitations.router, prefix="/api/my", tags=["my invitations"])
app.include_router(teams.router, prefix="/api/teams", tags=["teams"])
app.include_router(invitations.router, prefix="/api/invitations", tags=["invitations"])
app.include_router(users.router, prefix="/api/users", tags=["users"])


@app.get("/")
def root():
    return {"data": None, "message": "Teamtasks API. See /docs for the OpenAPI description.", "error": None}
