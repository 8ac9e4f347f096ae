"""Deletion policy on Actor."""

import pytest

from studyroom.principal import ANONYMOUS, Actor

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "actor, created_by, allowed",
    [
        (Actor(user_id="u1"), "u1", True),
        (Actor(user_id="u1"), "u2", False),
        (Actor(user_id="u1"), None, False),
        (ANONYMOUS, None, False),
        (ANONYMOUS, "u1", False),
        (Actor(user_id="admin", is_admin=True), None, True),
        (Actor(is_admin=True), "u1", True),
    ],
)
def test_can_delete(actor, created_by, allowed):
    assert actor.can_delete(created_by) is allowed


def test_anonymous():
    assert ANONYMOUS.is_anonymous is True
    assert Actor(user_id="u1").is_anonymous is False
