from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .exceptions import AuthorizationError

ROLE_ANONYMOUS = "anonymous"
ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    """
    Identity of whoever invokes a service operation.

    Every ownership and moderation check receives one of these explicitly;
    services never look at a request or any other ambient session state.
    """

    id: Optional[int]
    role: str = ROLE_ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ROLE_ADMIN

    def owns(self, owner_id: Any) -> bool:
        return self.is_authenticated and owner_id is not None and self.id == owner_id

    @classmethod
    def from_user(cls, user) -> "Caller":
        if user is None or not getattr(user, "is_authenticated", False):
            return ANONYMOUS
        if user.is_staff or getattr(user, "role", None) == ROLE_ADMIN:
            return cls(id=user.pk, role=ROLE_ADMIN)
        return cls(id=user.pk, role=ROLE_USER)


ANONYMOUS = Caller(id=None, role=ROLE_ANONYMOUS)


def caller_for(request) -> Caller:
    return Caller.from_user(getattr(request, "user", None))


def require_authenticated(actor: Caller) -> None:
    if not actor.is_authenticated:
        raise AuthorizationError("You must be logged in to do this.")


def require_admin(actor: Caller) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Only administrators can moderate content.")
