from __future__ import annotations

from dataclasses import dataclass

ENVIRONMENT_TYPES = {
    "animal": "Animal",
    "vegetal": "Vegetal",
    "otro": "Otro",
}


def environment_type_label(value: str | None) -> str:
    return ENVIRONMENT_TYPES.get(value or "", value or "Otro")


@dataclass
class Environment:
    """
    Training location (huerta, vivero, granja...) with its responsible teacher.

    `responsible_teacher` is the legacy free-text name kept for older records
    and for display; `responsible_id` is the authoritative reference.
    """
    id: int
    environment_name: str
    environment_type: str = "otro"
    responsible_id: int | None = None
    responsible_name: str = ""
    responsible_teacher: str = ""
    year: str = ""
    division: str = ""
    group: str = ""
    observations: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Environment":
        responsible_id = data.get("responsibleId")
        return cls(
            id=int(data["id"]),
            environment_name=str(data.get("environmentName") or ""),
            environment_type=str(data.get("environmentType") or "otro"),
            responsible_id=int(responsible_id) if responsible_id not in (None, "") else None,
            responsible_name=str(data.get("responsibleName") or ""),
            responsible_teacher=str(data.get("responsibleTeacher") or ""),
            year=str(data.get("year") or ""),
            division=str(data.get("division") or ""),
            group=str(data.get("group") or ""),
            observations=str(data.get("observations") or ""),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "environmentName": self.environment_name,
            "environmentType": self.environment_type,
            "responsibleId": self.responsible_id,
            "responsibleName": self.responsible_name,
            "responsibleTeacher": self.responsible_teacher,
            "year": self.year,
            "division": self.division,
            "group": self.group,
            "observations": self.observations,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
