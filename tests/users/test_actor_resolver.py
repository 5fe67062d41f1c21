from __future__ import annotations

import pytest

from absence_workflow.core.enums import Role
from absence_workflow.core.exceptions import AuthenticationError, AuthorizationError
from absence_workflow.users.actor import Actor, ActorResolver, require_role


def test_resolves_role_from_user_record(users):
    actor = ActorResolver(users).resolve({"user_id": "9"})

    assert actor == Actor(actor_id=9, role=Role.APPROVER)
    assert actor.is_approver


@pytest.mark.parametrize("session", [{}, {"user_id": None}, {"user_id": "abc"}, {"user_id": 0}, {"user_id": 404}])
def test_unresolvable_sessions_are_unauthorized(users, session):
    with pytest.raises(AuthenticationError):
        ActorResolver(users).resolve(session)


def test_inactive_user_is_unauthorized(users):
    with pytest.raises(AuthenticationError):
        ActorResolver(users).resolve({"user_id": 11})


def test_require_role():
    approver = Actor(actor_id=9, role=Role.APPROVER)
    assert require_role(approver, Role.APPROVER) is approver

    with pytest.raises(AuthorizationError):
        require_role(Actor(actor_id=3, role=Role.MEMBER), Role.APPROVER)
