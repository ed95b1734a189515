# Overview: Service-layer operations for the login session record kept by each client.

"""
Session Record Store

WHY: Each browser keeps its own session record under `sistemaAgraria_session`.
Here that record lives in the client's signed Flask session cookie, so one
client's login never authenticates another client, and two operators on two
terminals stay two operators. The record proves a prior successful login;
its age is checked on every protected request by AuthService.check_session().

SECURITY NOTES:
- The cookie is signed with SECRET_KEY; a tampered cookie is discarded by Flask
- The record only names the user; the roster is re-read on every check
- "Remember me" makes the cookie outlive the browser; the 24h limit still applies

A stored value that cannot be parsed is cleared, never surfaced.
"""

from __future__ import annotations

from datetime import timedelta

from flask import current_app
from flask import session as client_session

from ..models import Session


SESSION_KEY = "sistemaAgraria_session"

# Absolute lifetime counted from the login timestamp; no sliding renewal
SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)


class SessionStore:
    """The calling client's session record. Needs a request context."""

    def __init__(self, key: str = SESSION_KEY):
        self.key = key

    def read(self) -> Session | None:
        """
        This client's session, or None.

        A malformed record (not an object, missing fields, bad timestamp) is
        cleared as a side effect.
        """
        data = client_session.get(self.key)
        if data is None:
            return None

        try:
            return Session.from_dict(data)
        except (KeyError, TypeError, ValueError):
            current_app.logger.warning("Clearing malformed session record")
            self.clear()
            return None

    def write(self, session: Session) -> None:
        client_session[self.key] = session.to_dict()
        client_session.permanent = session.remember_me

    def clear(self) -> None:
        # Recovery progress shares the cookie; only the login record goes
        client_session.pop(self.key, None)
