# Overview: Service-layer operations for auth; roster access, login, session checks and role predicates.

"""
Authentication Service

WHY: Every action must be attributable, and the role decides what an
operator may open. AuthService is the one object that knows who is logged
in on the calling client; it is built once by create_app() and handed to
every page controller through the AppServices container instead of living
as a global.

SECURITY NOTES:
- Passwords hashed with bcrypt (BCRYPT_ROUNDS, 12 by default)
- Rosters still holding plaintext `password` fields are hashed on load
- Sessions are per client (signed cookie); lifetime is absolute (24h from login)
- Authorization always re-reads the user record; the session role is a snapshot
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta
from typing import Callable

import bcrypt
from flask import current_app

from ..models import Session, User
from ..permissions import Role, role_has_permission
from agraria.time_utils import utcnow
from .session_service import SESSION_ABSOLUTE_TIMEOUT, SessionStore
from .storage_service import USERS_KEY, Collection, KeyValueStore


MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    """Base class for login / session / role failures. Carries its HTTP status."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFields(AuthError):
    status_code = 400


class InvalidCredentials(AuthError):
    status_code = 401


class NotAuthenticated(AuthError):
    status_code = 401


class AccessDenied(AuthError):
    status_code = 403


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash password using bcrypt.

    WHY: rounds is configurable so tests can use the minimum cost (4).
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against a bcrypt hash. Exact match of the supplied
    string; an empty or unusable hash never matches.

    WHY timing-safe: bcrypt.checkpw() prevents timing attacks automatically.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


class UserRepository(Collection[User]):
    """
    The operator roster under `sistemaAgraria_users`.

    Load-time backfills:
    - plaintext `password` fields are replaced by bcrypt hashes and the
      roster is written back
    - unknown role strings are logged and read as the standard role
    """

    def __init__(self, store: KeyValueStore, seed: Callable[[], list[dict]] | None = None, bcrypt_rounds: int = 12):
        super().__init__(store, USERS_KEY, User, seed=seed)
        self.bcrypt_rounds = bcrypt_rounds

    def load(self) -> list[User]:
        raw = self.load_raw()
        seeded = raw is None
        if seeded:
            raw = self.seed() if self.seed else []

        for item in raw:
            if isinstance(item, dict) and not Role.is_known(item.get("role")):
                current_app.logger.warning(
                    "User %r has unknown role %r; treating as %s",
                    item.get("username"), item.get("role"), Role.STANDARD.value,
                )

        users = self._parse(raw)
        changed = seeded
        for user in users:
            if user.legacy_password is not None:
                user.password_hash = self.hash(user.legacy_password)
                user.legacy_password = None
                changed = True
        if changed:
            self.save(users)
        return users

    def hash(self, password: str) -> str:
        return hash_password(password, rounds=self.bcrypt_rounds)

    def find_by_username(self, username: str, users: list[User] | None = None) -> User | None:
        wanted = (username or "").strip().lower()
        if not wanted:
            return None
        for user in users if users is not None else self.load():
            if user.username.lower() == wanted:
                return user
        return None


class AuthService:
    """
    Login, session checks, role predicates and guards.

    `clock` and `sleep` are injected so expiry and the login delay can be
    driven from tests.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionStore,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], None] = time.sleep,
        login_delay: float = 1.0,
        session_max_age: timedelta = SESSION_ABSOLUTE_TIMEOUT,
    ):
        self.users = users
        self.sessions = sessions
        self.clock = clock
        self.sleep = sleep
        self.login_delay = login_delay
        self.session_max_age = session_max_age

    # ===== LOGIN / LOGOUT =====

    def login(self, username: str | None, password: str | None, remember_me: bool = False) -> Session:
        """
        Authenticate and store a new session for the calling client.

        The username is trimmed and matched case-insensitively; the password
        must match exactly and the account must be active.

        Raises:
            MissingFields: either input blank (raised before the delay)
            InvalidCredentials: no active user matches
        """
        username = str(username or "").strip()
        password = password if isinstance(password, str) else ""
        if not username or not password:
            raise MissingFields("Please fill in all fields")

        # Cosmetic loading delay; applies to success and failure alike
        if self.login_delay > 0:
            self.sleep(self.login_delay)

        user = self._match(username, password)
        if user is None:
            current_app.logger.info("Failed login for username %r", username)
            raise InvalidCredentials("Invalid username or password")

        session = Session(
            user_id=user.id,
            username=user.username,
            role=user.role,
            timestamp=self.clock(),
            remember_me=bool(remember_me),
        )
        self.sessions.write(session)
        current_app.logger.info("User %s logged in", user.username)
        return session

    def _match(self, username: str, password: str) -> User | None:
        wanted = username.lower()
        for user in self.users.load():
            if user.username.lower() != wanted or not user.active:
                continue
            if verify_password(password, user.password_hash):
                return user
        return None

    def logout(self) -> None:
        session = self.sessions.read()
        self.sessions.clear()
        if session is not None:
            current_app.logger.info("User %s logged out", session.username)

    # ===== SESSION =====

    def current_session(self) -> Session | None:
        """This client's session if still valid; see check_session()."""
        session = self.sessions.read()
        if session is None:
            return None

        if session.is_expired(self.clock(), self.session_max_age):
            self.sessions.clear()
            return None

        user = self._user_by_id(session.user_id)
        if user is None or not user.active:
            self.sessions.clear()
            return None
        return session

    def check_session(self) -> User | None:
        """
        The logged-in user, or None.

        Fails closed: the session is cleared when it is malformed, expired
        (now - timestamp >= max age), or its user is missing or inactive.
        """
        session = self.current_session()
        if session is None:
            return None
        return self._user_by_id(session.user_id)

    def get_current_user(self) -> User | None:
        return self.check_session()

    def _user_by_id(self, user_id: int) -> User | None:
        for user in self.users.load():
            if user.id == user_id:
                return user
        return None

    # ===== ROLE PREDICATES =====
    # Exactly one of admin / area lead / animal teacher / plant teacher / standard holds.

    def _role(self, user: User | None) -> Role | None:
        if user is None:
            user = self.check_session()
        return user.role if user is not None else None

    def has_role(self, role: Role, user: User | None = None) -> bool:
        return self._role(user) is role

    def is_admin(self, user: User | None = None) -> bool:
        return self.has_role(Role.ADMINISTRATOR, user)

    def is_area_lead(self, user: User | None = None) -> bool:
        return self.has_role(Role.AREA_LEAD, user)

    def is_animal_teacher(self, user: User | None = None) -> bool:
        return self.has_role(Role.ANIMAL_TEACHER, user)

    def is_plant_teacher(self, user: User | None = None) -> bool:
        return self.has_role(Role.PLANT_TEACHER, user)

    def is_teacher(self, user: User | None = None) -> bool:
        role = self._role(user)
        return role is not None and role.is_teacher

    def is_standard(self, user: User | None = None) -> bool:
        return self.has_role(Role.STANDARD, user)

    def get_teacher_kind(self, user: User | None = None) -> str | None:
        """'animal', 'vegetal', or None for non-teachers."""
        role = self._role(user)
        if role is None or role.teacher_kind is None:
            return None
        return role.teacher_kind.value

    def has_permission(self, permission_code: str, user: User | None = None) -> bool:
        role = self._role(user)
        return role is not None and role_has_permission(role, permission_code)

    # ===== GUARDS =====

    def require_auth(self) -> User:
        user = self.check_session()
        if user is None:
            raise NotAuthenticated("Authentication required")
        return user

    def require_admin(self) -> User:
        user = self.require_auth()
        if not self.is_admin(user):
            raise AccessDenied("Access denied. Administrator permissions are required.")
        return user

    def require_permission(self, permission_code: str) -> User:
        user = self.require_auth()
        if not self.has_permission(permission_code, user):
            raise AccessDenied(f"Access denied. Missing permission: {permission_code}")
        return user
