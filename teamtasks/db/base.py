from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import the models so they register with Base.metadata
from teamtasks.models import (  # noqa: E402,F401
    user,
    authentication,
    team,
    team_user,
    invitation,
    activity,
    backup_code,
    user_skill,
)
