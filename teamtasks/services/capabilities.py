"""
Team capabilities: which member knows which skill, at what level, and
whether they are free to take work.
"""

from typing import Dict, Iterable, List, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.db.queries import find_all, find_all_unarchived
from teamtasks.models.activity import Activity
from teamtasks.models.team import Team
from teamtasks.models.user import User
from teamtasks.models.user_skill import UserSkill
from teamtasks.schemas.capability import Capability
from teamtasks.schemas.user import UserOut
from teamtasks.services.teams import load_members


def busy_user_ids(activities: Iterable[Activity]) -> set:
    """Users assigned to an activity that is not completed yet"""
    return {
        activity.assigned_to
        for activity in activities
        if activity.assigned_to is not None and activity.completed_at is None
    }


def build_capabilities(
    members: Iterable[User],
    skills_by_user: Mapping[str, List[UserSkill]],
    activities: Iterable[Activity],
) -> Dict[str, List[Capability]]:
    """
    Group members' skills by skill name.

    Members keep the order they are given in; a member with no skills does
    not appear.
    """
    busy = busy_user_ids(activities)
    capabilities: Dict[str, List[Capability]] = {}
    for member in members:
        user_out = UserOut.model_validate(member)
        for skill in skills_by_user.get(member.id, []):
            name = skill.skill_name.lower()
            capabilities.setdefault(name, []).append(Capability(
                user=user_out,
                skill=name,
                level=skill.skill_level,
                available=member.id not in busy,
            ))
    return capabilities


async def load_capabilities(db: AsyncSession, team: Team) -> Dict[str, List[Capability]]:
    activities = await find_all_unarchived(db, Activity, [("team_id", team.id)])
    members = await load_members(db, team.id)
    skills_by_user = {
        member.id: await find_all(db, UserSkill, [("user_id", member.id)])
        for member in members
    }
    return build_capabilities(members, skills_by_user, activities)
