from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..permissions import Role
from agraria.time_utils import parse_iso_datetime, to_utc_z


@dataclass
class User:
    """
    Operator account as persisted in `sistemaAgraria_users`.

    WHY: Every action must be attributable, and the role decides what the
    operator can see. Passwords are kept as bcrypt hashes; a record loaded
    with a legacy plaintext `password` keeps it in `legacy_password` until the
    roster repository hashes it and writes the roster back.
    """
    id: int
    username: str
    password_hash: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    document: str = ""
    address: str = ""
    locality: str = ""
    party: str = ""
    postal_code: str = ""
    phone: str = ""
    alt_phone: str = ""
    role: Role = Role.STANDARD
    active: bool = True
    security_question: str = ""
    security_answer: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    legacy_password: str | None = field(default=None, repr=False, compare=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=int(data["id"]),
            username=str(data.get("username") or ""),
            password_hash=str(data.get("passwordHash") or ""),
            email=str(data.get("email") or ""),
            first_name=str(data.get("firstName") or ""),
            last_name=str(data.get("lastName") or ""),
            document=str(data.get("document") or ""),
            address=str(data.get("address") or ""),
            locality=str(data.get("locality") or ""),
            party=str(data.get("party") or ""),
            postal_code=str(data.get("postalCode") or ""),
            phone=str(data.get("phone") or ""),
            alt_phone=str(data.get("altPhone") or ""),
            role=Role.parse(data.get("role")),
            active=bool(data.get("active", True)),
            security_question=str(data.get("securityQuestion") or ""),
            security_answer=str(data.get("securityAnswer") or ""),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            legacy_password=data.get("password") if not data.get("passwordHash") else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "passwordHash": self.password_hash,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "document": self.document,
            "address": self.address,
            "locality": self.locality,
            "party": self.party,
            "postalCode": self.postal_code,
            "phone": self.phone,
            "altPhone": self.alt_phone,
            "role": self.role.value,
            "active": self.active,
            "securityQuestion": self.security_question,
            "securityAnswer": self.security_answer,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_public_dict(self) -> dict:
        """Shape returned to clients: no password hash, no security answer."""
        data = self.to_dict()
        data.pop("passwordHash")
        data.pop("securityAnswer")
        data["fullName"] = self.full_name
        data["roleLabel"] = self.role.label
        return data


@dataclass
class Session:
    """
    Proof of a prior successful login, kept per client under `sistemaAgraria_session`.

    The role is a snapshot taken at login; authorization always re-reads the
    user record, so a role change takes effect on the next request.
    """
    user_id: int
    username: str
    role: Role
    timestamp: datetime
    remember_me: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Raises KeyError / ValueError / TypeError on a malformed record."""
        if not isinstance(data, dict):
            raise TypeError("Session record must be an object")
        timestamp = parse_iso_datetime(data["timestamp"])
        if timestamp is None:
            raise ValueError("Session timestamp is empty")
        return cls(
            user_id=int(data["userId"]),
            username=str(data.get("username") or ""),
            role=Role.parse(data.get("role")),
            timestamp=timestamp,
            remember_me=bool(data.get("rememberMe", False)),
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "timestamp": to_utc_z(self.timestamp),
            "rememberMe": self.remember_me,
        }

    def age(self, now: datetime) -> timedelta:
        return now - self.timestamp

    def is_expired(self, now: datetime, max_age: timedelta) -> bool:
        return self.age(now) >= max_age
