# Overview: Aggregate counts for the dashboard across every collection.

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

from ..models import Activity, Environment, Sale, User
from ..permissions import visible_pages
from ..validation import to_cents
from agraria.time_utils import today
from .activity_service import newest_first
from .auth_service import UserRepository
from .environment_service import EnvironmentRepository, normalize_teacher_name
from .storage_service import Collection


RECENT_ACTIVITY_LIMIT = 5


def activities_for_user(user: User, activities: list[Activity], environments: list[Environment]) -> list[Activity]:
    """
    Teachers: activities of their kind, in environments assigned to them or
    naming them as the teacher. Everyone else: activities they registered.
    """
    kind = user.role.teacher_kind
    if kind is None:
        return [a for a in activities if a.user_id == user.id]

    env_ids = {e.id for e in environments if e.environment_type == kind.value and e.responsible_id == user.id}
    own_name = normalize_teacher_name(user.full_name)
    return [
        a
        for a in activities
        if a.environment_type == kind.value
        and (a.environment_id in env_ids or normalize_teacher_name(a.responsible_teacher) == own_name)
    ]


class DashboardService:
    def __init__(
        self,
        users: UserRepository,
        environments: EnvironmentRepository,
        activities: Collection[Activity],
        sales: Collection[Sale],
        today_fn: Callable[[], date] = today,
    ):
        self.users = users
        self.environments = environments
        self.activities = activities
        self.sales = sales
        self.today_fn = today_fn

    def stats(self, user: User) -> dict:
        users = self.users.load()
        environments = self.environments.load()
        activities = self.activities.load()
        sales = self.sales.load()

        day = self.today_fn()
        month_prefix = day.strftime("%Y-%m")
        month_sales = sum(
            (Decimal(str(s.total)) for s in sales if s.sale_date.startswith(month_prefix)),
            Decimal("0"),
        )

        return {
            "activeUsers": sum(1 for u in users if u.active),
            "environments": len(environments),
            "todayActivities": sum(1 for a in activities if a.activity_date == day.isoformat()),
            "monthSales": float(to_cents(month_sales)),
            "userActivities": len(activities_for_user(user, activities, environments)),
            "userEnvironments": sum(1 for e in environments if e.responsible_id == user.id),
            "userSales": sum(1 for s in sales if s.user_id == user.id),
        }

    def recent_activities(self, limit: int = RECENT_ACTIVITY_LIMIT) -> list[Activity]:
        return newest_first(self.activities.load())[:limit]

    def overview(self, user: User) -> dict:
        return {
            "user": {
                "id": user.id,
                "username": user.username,
                "displayName": user.full_name or user.username,
                "role": user.role.value,
                "roleLabel": user.role.label,
            },
            "pages": visible_pages(user.role),
            "stats": self.stats(user),
            "recentActivities": [a.to_dict() for a in self.recent_activities()],
        }
