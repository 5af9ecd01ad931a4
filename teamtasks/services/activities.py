"""
Activity lifecycle.

State is derived from the timestamps of an activity:

    unassigned   assigned_to is null
    running      assigned, not paused, not completed
    paused       paused_at set
    completed    completed_at set

Each transition validates the current state and returns the column updates
to hand to update_resource; nothing is written here.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

from teamtasks.core.errors import ActivityError, ApiError
from teamtasks.db.values import DatabaseValue
from teamtasks.models.activity import Activity

Updates = List[Tuple[str, Any]]


class Transition(str, Enum):
    PAUSE = "pause"
    RESUME = "resume"
    COMPLETE = "complete"
    REOPEN = "reopen"


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _reject(error: ActivityError):
    raise ApiError(400, error)


def assign(activity: Activity, user_id: str, now: Optional[datetime] = None) -> Updates:
    if activity.completed_at is not None:
        _reject(ActivityError.ActivityAlreadyEnded)
    updates: Updates = [("assigned_to", user_id)]
    if activity.started_at is None:
        updates.append(("started_at", DatabaseValue.timestamp(_now(now))))
    return updates


def unassign(activity: Activity) -> Updates:
    if activity.assigned_to is None:
        _reject(ActivityError.ActivityNotAssigned)
    return [("assigned_to", DatabaseValue.none())]


def pause(activity: Activity, now: Optional[datetime] = None) -> Updates:
    if activity.assigned_to is None:
        _reject(ActivityError.ActivityNotStarted)
    if activity.completed_at is not None:
        _reject(ActivityError.ActivityAlreadyEnded)
    if activity.paused_at is not None:
        _reject(ActivityError.ActivityAlreadyPaused)
    return [("paused_at", DatabaseValue.timestamp(_now(now)))]


def resume(activity: Activity) -> Updates:
    if activity.paused_at is None:
        _reject(ActivityError.ActivityNotPaused)
    return [("paused_at", DatabaseValue.none())]


def complete(activity: Activity, now: Optional[datetime] = None) -> Updates:
    if activity.completed_at is not None:
        _reject(ActivityError.ActivityAlreadyEnded)
    return [
        ("completed_at", DatabaseValue.timestamp(_now(now))),
        ("paused_at", DatabaseValue.none()),
    ]


def reopen(activity: Activity) -> Updates:
    if activity.completed_at is None:
        _reject(ActivityError.ActivityNotEnded)
    return [("completed_at", DatabaseValue.none())]


def apply_transition(activity: Activity, transition: Transition, now: Optional[datetime] = None) -> Updates:
    if transition == Transition.PAUSE:
        return pause(activity, now)
    if transition == Transition.RESUME:
        return resume(activity)
    if transition == Transition.COMPLETE:
        return complete(activity, now)
    return reopen(activity)
