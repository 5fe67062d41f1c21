from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .repository import UserRepository


@dataclass(frozen=True)
class Actor:
    """Who is making the current call. Passed explicitly into every service call."""

    actor_id: int
    role: Role

    @property
    def is_approver(self) -> bool:
        return self.role == Role.APPROVER


class ActorResolver:
    """Maps an authenticated session to an :class:`Actor`.

    The session only has to carry ``user_id``; role and active flag are
    re-read from the users table so a demoted or disabled account loses
    access immediately.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def resolve(self, session: Mapping[str, Any]) -> Actor:
        raw_id = session.get("user_id")
        try:
            user_id = int(raw_id)
        except (TypeError, ValueError):
            raise AuthenticationError("Authentication required")
        if user_id <= 0:
            raise AuthenticationError("Authentication required")

        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Unknown or inactive user")
        return Actor(actor_id=user.user_id, role=user.role)


def require_role(actor: Actor, role: Role) -> Actor:
    if actor.role != role:
        raise AuthorizationError("You do not have permission to perform this action")
    return actor
