# Overview: Closed set of operator roles and the teacher subtypes derived from them.

from __future__ import annotations

from enum import Enum


class TeacherKind(str, Enum):
    """Which kind of environment a teacher is responsible for."""
    ANIMAL = "animal"
    PLANT = "vegetal"


class Role(str, Enum):
    """
    Operator roles as persisted in the user roster.

    WHY: Values are the exact strings stored in `sistemaAgraria_users`, so
    existing rosters load unchanged. Every role check goes through this enum
    and the permission table in matrix.py instead of string comparisons.
    """
    ADMINISTRATOR = "administrador"
    AREA_LEAD = "jefe_area"
    ANIMAL_TEACHER = "profesor_animal"
    PLANT_TEACHER = "profesor_vegetal"
    STANDARD = "estandar"

    @classmethod
    def parse(cls, value) -> "Role":
        """
        Parse a stored role string. Unknown strings fall back to STANDARD.

        Raises nothing; callers that must reject unknown roles (user forms)
        use is_known() first.
        """
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value or "").strip())
        except ValueError:
            return cls.STANDARD

    @classmethod
    def is_known(cls, value) -> bool:
        return str(value or "").strip() in {r.value for r in cls}

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]

    @property
    def teacher_kind(self) -> TeacherKind | None:
        if self is Role.ANIMAL_TEACHER:
            return TeacherKind.ANIMAL
        if self is Role.PLANT_TEACHER:
            return TeacherKind.PLANT
        return None

    @property
    def is_teacher(self) -> bool:
        return self.teacher_kind is not None


ROLE_LABELS = {
    Role.ADMINISTRATOR: "Administrador",
    Role.AREA_LEAD: "Jefe de Área",
    Role.ANIMAL_TEACHER: "Profesor - Animal",
    Role.PLANT_TEACHER: "Profesor - Vegetal",
    Role.STANDARD: "Usuario Estándar",
}


def teacher_role_for(kind: TeacherKind | str | None) -> Role | None:
    """Teacher role responsible for an environment type (None for 'otro')."""
    if kind is None:
        return None
    value = kind.value if isinstance(kind, TeacherKind) else str(kind)
    if value == TeacherKind.ANIMAL.value:
        return Role.ANIMAL_TEACHER
    if value == TeacherKind.PLANT.value:
        return Role.PLANT_TEACHER
    return None
