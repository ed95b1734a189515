# Overview: Service-layer operations for the class activity log.

"""
Activities Service

Activities are logged against an environment; the environment's name, type,
responsible teacher and year/division/group are copied onto the activity
when it is registered, so later edits to the environment do not rewrite
history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from ..models import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES, Activity, User
from ..validation import (
    FieldErrors,
    NotFoundError,
    ValidationError,
    clean_str,
    ensure_payload,
    parse_int,
    parse_past_date,
    parse_time,
    require_fields,
)
from agraria.time_utils import to_utc_z, today, utcnow
from .environment_service import EnvironmentRepository
from .storage_service import Collection


REQUIRED_ACTIVITY_FIELDS = [
    "activityDate",
    "activityTime",
    "duration",
    "activityTitle",
    "activityDescription",
]


@dataclass
class ActivityInput:
    activity_date: str
    activity_time: str
    duration: int
    activity_title: str
    activity_description: str
    observations: str
    environment_id: int | None = None


def parse_activity_input(payload, creating: bool, today_date: date) -> ActivityInput:
    payload = ensure_payload(payload)
    errors = FieldErrors()

    required = list(REQUIRED_ACTIVITY_FIELDS)
    if creating:
        required.insert(0, "environmentId")
    require_fields(payload, required, errors)

    environment_id = parse_int(payload, "environmentId", errors) if creating else None
    activity_date = parse_past_date(payload, "activityDate", errors, today_date)
    activity_time = parse_time(payload, "activityTime", errors)

    duration = parse_int(payload, "duration", errors)
    if duration is not None and not (MIN_DURATION_MINUTES <= duration <= MAX_DURATION_MINUTES):
        errors.add(
            "duration",
            f"Duration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes",
        )

    errors.raise_if_any()
    return ActivityInput(
        activity_date=activity_date.isoformat(),
        activity_time=activity_time,
        duration=duration,
        activity_title=clean_str(payload, "activityTitle"),
        activity_description=clean_str(payload, "activityDescription"),
        observations=clean_str(payload, "observations"),
        environment_id=environment_id,
    )


def newest_first(activities: list[Activity]) -> list[Activity]:
    return sorted(activities, key=lambda a: a.sort_key, reverse=True)


class ActivityService:
    def __init__(
        self,
        activities: Collection[Activity],
        environments: EnvironmentRepository,
        today_fn: Callable[[], date] = today,
    ):
        self.activities = activities
        self.environments = environments
        self.today_fn = today_fn

    def list_activities(self) -> list[Activity]:
        return newest_first(self.activities.load())

    def get_activity(self, activity_id: int) -> Activity:
        activity = self.activities.get(activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        return activity

    def create_activity(self, payload, user: User) -> Activity:
        data = parse_activity_input(payload, creating=True, today_date=self.today_fn())

        env = next((e for e in self.environments.load() if e.id == data.environment_id), None)
        if env is None:
            raise ValidationError({"environmentId": "Environment not found"})

        activities = self.activities.load()
        now = to_utc_z(utcnow())
        activity = Activity(
            id=self.activities.next_id(activities),
            environment_id=env.id,
            environment_name=env.environment_name,
            environment_type=env.environment_type,
            responsible_teacher=env.responsible_teacher,
            year=env.year,
            division=env.division,
            group=env.group,
            activity_date=data.activity_date,
            activity_time=data.activity_time,
            duration=data.duration,
            activity_title=data.activity_title,
            activity_description=data.activity_description,
            observations=data.observations,
            user_id=user.id,
            created_at=now,
            updated_at=now,
        )
        activities.append(activity)
        self.activities.save(activities)
        return activity

    def update_activity(self, activity_id: int, payload) -> Activity:
        data = parse_activity_input(payload, creating=False, today_date=self.today_fn())
        activities = self.activities.load()
        activity = next((a for a in activities if a.id == activity_id), None)
        if activity is None:
            raise NotFoundError("Activity not found")

        activity.activity_date = data.activity_date
        activity.activity_time = data.activity_time
        activity.duration = data.duration
        activity.activity_title = data.activity_title
        activity.activity_description = data.activity_description
        activity.observations = data.observations
        activity.updated_at = to_utc_z(utcnow())
        self.activities.save(activities)
        return activity

    def delete_activity(self, activity_id: int) -> None:
        if not self.activities.delete(activity_id):
            raise NotFoundError("Activity not found")
