# Overview: Service-layer operations for training environments and their responsible teachers.

"""
Environments Service

WHY: Each environment (huerta, vivero, granja...) has one responsible
teacher. Teachers only see the environments of their own kind that are
assigned to them; admins and standard users see and manage all of them.

Older records only carry the teacher's display name; on load they are
backfilled with `responsibleId`, resolved by name or, failing that, by the
first teacher of the matching kind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from flask import current_app

from ..models import ENVIRONMENT_TYPES, Environment, User
from ..permissions import teacher_role_for
from ..validation import FieldErrors, NotFoundError, clean_str, ensure_payload, parse_int, require_fields
from agraria.time_utils import to_utc_z, utcnow
from .auth_service import UserRepository
from .storage_service import ENVIRONMENTS_KEY, Collection, KeyValueStore


REQUIRED_ENVIRONMENT_FIELDS = ["environmentName", "environmentType", "responsibleId", "year", "division", "group"]

_PROF_PREFIX = re.compile(r"^\s*prof\.?\s*", re.IGNORECASE)


def normalize_teacher_name(value: str | None) -> str:
    """'Prof. María González' and 'maría gonzález' compare equal."""
    return _PROF_PREFIX.sub("", (value or "").lower()).strip()


def teacher_display_name(user: User) -> str:
    return f"Prof. {user.full_name}"


class EnvironmentRepository(Collection[Environment]):
    def __init__(self, store: KeyValueStore, users: UserRepository, seed: Callable[[], list[dict]] | None = None):
        super().__init__(store, ENVIRONMENTS_KEY, Environment, seed=seed)
        self.users = users

    def load(self) -> list[Environment]:
        environments = super().load()
        if any(env.responsible_id is None for env in environments):
            if self._backfill_responsibles(environments):
                self.save(environments)
        return environments

    def _backfill_responsibles(self, environments: list[Environment]) -> bool:
        users = self.users.load()
        changed = False
        for env in environments:
            if env.responsible_id is not None:
                continue
            wanted = normalize_teacher_name(env.responsible_name or env.responsible_teacher)
            candidate = next(
                (u for u in users if wanted and normalize_teacher_name(u.full_name) == wanted),
                None,
            )
            if candidate is None:
                role = teacher_role_for(env.environment_type)
                candidate = next((u for u in users if role is not None and u.role is role), None)
            if candidate is None:
                continue
            env.responsible_id = candidate.id
            env.responsible_name = candidate.full_name
            if not env.responsible_teacher:
                env.responsible_teacher = env.responsible_name
            changed = True
            current_app.logger.info(
                "Environment %r assigned to user %s during load", env.environment_name, candidate.username
            )
        return changed


def is_assigned_to(env: Environment, user: User) -> bool:
    """True when the environment is of the teacher's kind and names them as responsible."""
    kind = user.role.teacher_kind
    if kind is None or env.environment_type != kind.value:
        return False
    if env.responsible_id is not None and env.responsible_id == user.id:
        return True
    return normalize_teacher_name(env.responsible_name or env.responsible_teacher) == normalize_teacher_name(user.full_name)


@dataclass
class EnvironmentInput:
    environment_name: str
    environment_type: str
    responsible_id: int
    year: str
    division: str
    group: str
    observations: str


def parse_environment_input(payload) -> EnvironmentInput:
    payload = ensure_payload(payload)
    errors = FieldErrors()
    require_fields(payload, REQUIRED_ENVIRONMENT_FIELDS, errors)

    env_type = clean_str(payload, "environmentType")
    if env_type and env_type not in ENVIRONMENT_TYPES:
        errors.add("environmentType", "Unknown environment type")

    responsible_id = parse_int(payload, "responsibleId", errors)

    errors.raise_if_any()
    return EnvironmentInput(
        environment_name=clean_str(payload, "environmentName"),
        environment_type=env_type,
        responsible_id=responsible_id,
        year=clean_str(payload, "year"),
        division=clean_str(payload, "division"),
        group=clean_str(payload, "group"),
        observations=clean_str(payload, "observations"),
    )


class EnvironmentService:
    def __init__(self, environments: EnvironmentRepository, users: UserRepository):
        self.environments = environments
        self.users = users

    def list_environments(self, viewer: User | None = None) -> list[Environment]:
        """All environments, or only the assigned ones when the viewer is a teacher."""
        environments = self.environments.load()
        if viewer is not None and viewer.role.is_teacher:
            environments = [env for env in environments if is_assigned_to(env, viewer)]
        return environments

    def get_environment(self, environment_id: int, viewer: User | None = None) -> Environment:
        for env in self.list_environments(viewer):
            if env.id == environment_id:
                return env
        raise NotFoundError("Environment not found")

    def _resolve_responsible(self, data: EnvironmentInput, errors: FieldErrors) -> User | None:
        responsible = next((u for u in self.users.load() if u.id == data.responsible_id), None)
        if responsible is None:
            errors.add("responsibleId", "Responsible user not found")
            return None
        required_role = teacher_role_for(data.environment_type)
        if required_role is not None and responsible.role is not required_role:
            errors.add("responsibleId", f"The responsible user must be a {required_role.label}")
        return responsible

    def _validate(self, environments: list[Environment], data: EnvironmentInput, exclude_id: int | None) -> User:
        errors = FieldErrors()
        wanted = data.environment_name.lower()
        if any(env.environment_name.lower() == wanted and env.id != exclude_id for env in environments):
            errors.add("environmentName", "An environment with this name already exists")
        responsible = self._resolve_responsible(data, errors)
        errors.raise_if_any()
        return responsible

    @staticmethod
    def _apply(env: Environment, data: EnvironmentInput, responsible: User) -> None:
        env.environment_name = data.environment_name
        env.environment_type = data.environment_type
        env.responsible_id = responsible.id
        env.responsible_name = responsible.full_name
        env.responsible_teacher = teacher_display_name(responsible)
        env.year = data.year
        env.division = data.division
        env.group = data.group
        env.observations = data.observations

    def create_environment(self, payload) -> Environment:
        data = parse_environment_input(payload)
        environments = self.environments.load()
        responsible = self._validate(environments, data, exclude_id=None)

        now = to_utc_z(utcnow())
        env = Environment(
            id=self.environments.next_id(environments),
            environment_name=data.environment_name,
            created_at=now,
            updated_at=now,
        )
        self._apply(env, data, responsible)
        environments.append(env)
        self.environments.save(environments)
        return env

    def update_environment(self, environment_id: int, payload) -> Environment:
        data = parse_environment_input(payload)
        environments = self.environments.load()
        env = next((e for e in environments if e.id == environment_id), None)
        if env is None:
            raise NotFoundError("Environment not found")
        responsible = self._validate(environments, data, exclude_id=environment_id)

        self._apply(env, data, responsible)
        env.updated_at = to_utc_z(utcnow())
        self.environments.save(environments)
        return env

    def delete_environment(self, environment_id: int) -> None:
        if not self.environments.delete(environment_id):
            raise NotFoundError("Environment not found")
