# Overview: Service-layer operations for the user roster (admin-only CRUD).

"""
User Administration Service

WHY: Administrators maintain the roster that login, recovery and the
environment assignments all read. Username (case-insensitive), document and
email are unique; a password is required on create and optional on update
(blank keeps the current one).
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..models import User
from ..permissions import Role
from ..validation import (
    FieldErrors,
    NotFoundError,
    ValidationError,
    clean_str,
    ensure_payload,
    is_valid_email,
    parse_bool,
    require_fields,
)
from agraria.time_utils import to_utc_z, utcnow
from .auth_service import MIN_PASSWORD_LENGTH, UserRepository


REQUIRED_USER_FIELDS = [
    "lastName",
    "firstName",
    "document",
    "email",
    "username",
    "role",
    "securityQuestion",
    "securityAnswer",
]


class UserError(Exception):
    """Roster rule violation that is not tied to a form field."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class UserInput:
    last_name: str
    first_name: str
    document: str
    email: str
    username: str
    role: Role
    security_question: str
    security_answer: str
    password: str | None
    active: bool
    address: str = ""
    locality: str = ""
    party: str = ""
    postal_code: str = ""
    phone: str = ""
    alt_phone: str = ""


def parse_user_input(payload, creating: bool) -> UserInput:
    """
    Validate a user form into a UserInput.

    Raises ValidationError with one message per offending field.
    """
    payload = ensure_payload(payload)
    errors = FieldErrors()

    required = list(REQUIRED_USER_FIELDS)
    if creating:
        required.append("password")
    require_fields(payload, required, errors)

    email = clean_str(payload, "email")
    if email and not is_valid_email(email):
        errors.add("email", "Invalid email address")

    role = clean_str(payload, "role")
    if role and not Role.is_known(role):
        errors.add("role", "Unknown role")

    password = payload.get("password") or ""
    if not isinstance(password, str):
        errors.add("password", "Invalid password")
        password = ""
    if password and len(password) < MIN_PASSWORD_LENGTH:
        errors.add("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    active = parse_bool(payload, "active", errors, default=True)

    errors.raise_if_any()

    return UserInput(
        last_name=clean_str(payload, "lastName"),
        first_name=clean_str(payload, "firstName"),
        document=clean_str(payload, "document"),
        email=email,
        username=clean_str(payload, "username"),
        role=Role(role),
        security_question=clean_str(payload, "securityQuestion"),
        security_answer=clean_str(payload, "securityAnswer"),
        password=password or None,
        active=active,
        address=clean_str(payload, "address"),
        locality=clean_str(payload, "locality"),
        party=clean_str(payload, "party"),
        postal_code=clean_str(payload, "postalCode"),
        phone=clean_str(payload, "phone"),
        alt_phone=clean_str(payload, "altPhone"),
    )


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    def list_users(self) -> list[User]:
        return self.users.load()

    def list_teachers(self, kind: str | None = None) -> list[User]:
        """Users holding a teacher role, optionally of one kind ('animal' / 'vegetal')."""
        teachers = [u for u in self.users.load() if u.role.is_teacher]
        if kind:
            teachers = [u for u in teachers if u.role.teacher_kind.value == kind]
        return teachers

    def get_user(self, user_id: int) -> User:
        for user in self.users.load():
            if user.id == user_id:
                return user
        raise NotFoundError("User not found")

    def _check_unique(self, users: list[User], data: UserInput, exclude_id: int | None) -> None:
        errors = FieldErrors()
        for other in users:
            if other.id == exclude_id:
                continue
            if other.username.lower() == data.username.lower():
                errors.add("username", "This username already exists")
            if other.document and other.document == data.document:
                errors.add("document", "A user with this document already exists")
            if other.email and other.email.lower() == data.email.lower():
                errors.add("email", "A user with this email already exists")
        errors.raise_if_any()

    def _apply(self, user: User, data: UserInput) -> None:
        user.last_name = data.last_name
        user.first_name = data.first_name
        user.document = data.document
        user.email = data.email
        user.username = data.username
        user.role = data.role
        user.security_question = data.security_question
        user.security_answer = data.security_answer
        user.active = data.active
        user.address = data.address
        user.locality = data.locality
        user.party = data.party
        user.postal_code = data.postal_code
        user.phone = data.phone
        user.alt_phone = data.alt_phone
        if data.password:
            user.password_hash = self.users.hash(data.password)

    def create_user(self, payload) -> User:
        data = parse_user_input(payload, creating=True)
        users = self.users.load()
        self._check_unique(users, data, exclude_id=None)

        now = to_utc_z(utcnow())
        user = User(id=self.users.next_id(users), username=data.username, created_at=now, updated_at=now)
        self._apply(user, data)
        users.append(user)
        self.users.save(users)
        current_app.logger.info("Created user %s (%s)", user.username, user.role.value)
        return user

    def update_user(self, user_id: int, payload) -> User:
        data = parse_user_input(payload, creating=False)
        users = self.users.load()
        user = next((u for u in users if u.id == user_id), None)
        if user is None:
            raise NotFoundError("User not found")
        self._check_unique(users, data, exclude_id=user_id)

        self._apply(user, data)
        user.updated_at = to_utc_z(utcnow())
        self.users.save(users)
        return user

    def delete_user(self, user_id: int, acting_user: User) -> None:
        if acting_user.id == user_id:
            raise UserError("You cannot delete your own account")
        if not self.users.delete(user_id):
            raise NotFoundError("User not found")
        current_app.logger.info("User %s deleted user id %s", acting_user.username, user_id)

    def set_password(self, username: str, password: str) -> User:
        """Administrative password reset (CLI)."""
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"})
        users = self.users.load()
        user = self.users.find_by_username(username, users)
        if user is None:
            raise NotFoundError("User not found")
        user.password_hash = self.users.hash(password)
        user.updated_at = to_utc_z(utcnow())
        self.users.save(users)
        current_app.logger.info("Password reset for user %s", user.username)
        return user
