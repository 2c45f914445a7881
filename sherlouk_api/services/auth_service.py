"""
Authentication use cases.

DemoAuthenticator is NOT a production authenticator: it accepts any
non-empty email/password strings, whitespace included, and hands back a
fixed token. It exists so the frontend login flow works against a local
backend. Swap it for a real Authenticator on ``app.state.authenticator``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

from sherlouk_api.core.errors import ValidationError

logger = logging.getLogger(__name__)

DEMO_TOKEN = "demo-token"
DEMO_USER_ID = "u1"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_id: str
    email: str

    def as_dict(self) -> dict:
        return {"token": self.token, "user": {"id": self.user_id, "email": self.email}}


class Authenticator(ABC):
    """Checks a credential pair and issues a token."""

    @abstractmethod
    def login(self, email: object, password: object) -> LoginResult:
        raise NotImplementedError


def _filled(value: object) -> bool:
    return isinstance(value, str) and value != ""


class DemoAuthenticator(Authenticator):
    """Non-production stub: no credential verification at all."""

    def login(self, email: object, password: object) -> LoginResult:
        if not (_filled(email) and _filled(password)):
            logger.info("Rejected login with missing email or password")
            raise ValidationError("email and password required")
        return LoginResult(token=DEMO_TOKEN, user_id=DEMO_USER_ID, email=email)
