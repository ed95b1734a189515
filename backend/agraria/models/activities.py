from __future__ import annotations

from dataclasses import dataclass

MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480


@dataclass
class Activity:
    """
    A logged class activity. Environment name, type and classification are
    copied from the environment at registration time.
    """
    id: int
    environment_id: int | None
    environment_name: str = ""
    environment_type: str = ""
    responsible_teacher: str = ""
    year: str = ""
    division: str = ""
    group: str = ""
    activity_date: str = ""
    activity_time: str = ""
    duration: int = 0
    activity_title: str = ""
    activity_description: str = ""
    observations: str = ""
    user_id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def sort_key(self) -> str:
        return f"{self.activity_date} {self.activity_time}"

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        env_id = data.get("environmentId")
        user_id = data.get("userId")
        return cls(
            id=int(data["id"]),
            environment_id=int(env_id) if env_id not in (None, "") else None,
            environment_name=str(data.get("environmentName") or ""),
            environment_type=str(data.get("environmentType") or ""),
            responsible_teacher=str(data.get("responsibleTeacher") or ""),
            year=str(data.get("year") or ""),
            division=str(data.get("division") or ""),
            group=str(data.get("group") or ""),
            activity_date=str(data.get("activityDate") or ""),
            activity_time=str(data.get("activityTime") or ""),
            duration=int(data.get("duration") or 0),
            activity_title=str(data.get("activityTitle") or ""),
            activity_description=str(data.get("activityDescription") or ""),
            observations=str(data.get("observations") or ""),
            user_id=int(user_id) if user_id not in (None, "") else None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "environmentId": self.environment_id,
            "environmentName": self.environment_name,
            "environmentType": self.environment_type,
            "responsibleTeacher": self.responsible_teacher,
            "year": self.year,
            "division": self.division,
            "group": self.group,
            "activityDate": self.activity_date,
            "activityTime": self.activity_time,
            "duration": self.duration,
            "activityTitle": self.activity_title,
            "activityDescription": self.activity_description,
            "observations": self.observations,
            "userId": self.user_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
