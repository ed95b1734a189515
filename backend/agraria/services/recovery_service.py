# Overview: Password recovery by security question; a three-step linear state machine.

"""
Password Recovery

WHY: Operators who forget their password answer the security question
stored on their account. The flow is strictly linear:

    IDENTIFY_USER -> ANSWER_QUESTION -> SET_NEW_PASSWORD -> COMPLETED

A failed step stays where it is. There is no backward transition, no
timeout, no retry limit and no lockout. Dropping the PasswordRecovery
object (closing the dialog) discards all progress. Over HTTP the state is
kept per client via to_dict()/from_dict() in the signed Flask session.
"""

from __future__ import annotations

from enum import Enum

from flask import current_app

from .auth_service import MIN_PASSWORD_LENGTH, UserRepository
from agraria.time_utils import to_utc_z, utcnow


class RecoveryStep(str, Enum):
    IDENTIFY_USER = "identify_user"
    ANSWER_QUESTION = "answer_question"
    SET_NEW_PASSWORD = "set_new_password"
    COMPLETED = "completed"


class RecoveryError(Exception):
    """Recovery step failed; `step` is where the flow stays."""

    def __init__(self, message: str, step: RecoveryStep | None = None):
        super().__init__(message)
        self.message = message
        self.step = step


class UserNotFound(RecoveryError):
    pass


class WrongAnswer(RecoveryError):
    pass


class PasswordTooShort(RecoveryError):
    pass


class PasswordMismatch(RecoveryError):
    pass


class RecoveryStepError(RecoveryError):
    """A step was called out of order."""
    pass


def _normalize_answer(value: str | None) -> str:
    return (value or "").strip().lower()


class PasswordRecovery:
    def __init__(
        self,
        users: UserRepository,
        step: RecoveryStep = RecoveryStep.IDENTIFY_USER,
        user_id: int | None = None,
    ):
        self.users = users
        self.step = step
        self.user_id = user_id

    def _expect(self, step: RecoveryStep) -> None:
        if self.step is not step:
            raise RecoveryStepError(
                f"Recovery is at step '{self.step.value}', not '{step.value}'",
                step=self.step,
            )

    def _selected_user(self, users=None):
        for user in users if users is not None else self.users.load():
            if user.id == self.user_id:
                return user
        raise UserNotFound("User not found", step=self.step)

    @property
    def security_question(self) -> str | None:
        if self.user_id is None:
            return None
        return self._selected_user().security_question

    def identify(self, username: str | None) -> str:
        """Step 1. Returns the security question of the matching user."""
        self._expect(RecoveryStep.IDENTIFY_USER)
        if not (username or "").strip():
            raise RecoveryError("Enter a username", step=self.step)

        user = self.users.find_by_username(username)
        if user is None:
            raise UserNotFound("User not found", step=self.step)

        self.user_id = user.id
        self.step = RecoveryStep.ANSWER_QUESTION
        return user.security_question

    def answer(self, text: str | None) -> None:
        """
        Step 2. Both sides trimmed and lowercased, then compared exactly.
        An account with no stored answer cannot be recovered this way.
        """
        self._expect(RecoveryStep.ANSWER_QUESTION)
        user = self._selected_user()
        expected = _normalize_answer(user.security_answer)
        if not expected or _normalize_answer(text) != expected:
            raise WrongAnswer("Incorrect answer", step=self.step)
        self.step = RecoveryStep.SET_NEW_PASSWORD

    def set_password(self, new_password: str | None, confirm_password: str | None) -> None:
        """
        Step 3. Overwrites the selected user's password and re-persists the
        whole roster. A rejected password leaves the stored one unchanged.
        """
        self._expect(RecoveryStep.SET_NEW_PASSWORD)
        new_password = new_password or ""
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise PasswordTooShort(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                step=self.step,
            )
        if new_password != (confirm_password or ""):
            raise PasswordMismatch("Passwords do not match", step=self.step)

        users = self.users.load()
        user = self._selected_user(users)
        user.password_hash = self.users.hash(new_password)
        user.updated_at = to_utc_z(utcnow())
        self.users.save(users)

        self.step = RecoveryStep.COMPLETED
        current_app.logger.info("Password reset through recovery for user %s", user.username)

    def to_dict(self) -> dict:
        return {"step": self.step.value, "user_id": self.user_id}

    @classmethod
    def from_dict(cls, users: UserRepository, data: dict | None) -> "PasswordRecovery":
        """Restore a flow; anything unreadable starts over at step 1."""
        if not isinstance(data, dict):
            return cls(users)
        try:
            step = RecoveryStep(data.get("step"))
        except ValueError:
            return cls(users)
        user_id = data.get("user_id")
        if step is not RecoveryStep.IDENTIFY_USER and not isinstance(user_id, int):
            return cls(users)
        return cls(users, step=step, user_id=user_id)
