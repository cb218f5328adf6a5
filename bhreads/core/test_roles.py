# bhreads/core/test_roles.py
import pytest

from bhreads.core.exceptions import ForbiddenError
from bhreads.core.roles import (
    Role, can_delete, ensure_can_delete, ensure_owner, is_admin, is_moderator
)


def test_roles_are_ordered():
    assert Role.USER < Role.MODERATOR < Role.ADMIN
    assert max(Role.MODERATOR, Role.ADMIN) is Role.ADMIN

def test_parse_falls_back_to_user():
    assert Role.parse("admin") is Role.ADMIN
    assert Role.parse(None) is Role.USER
    assert Role.parse("superuser") is Role.USER

def test_moderator_flags():
    assert is_moderator("moderator")
    assert is_moderator("admin")
    assert not is_moderator("user")
    assert not is_admin("moderator")

@pytest.mark.parametrize("caller, role, expected", [
    ("author", "user", True),
    ("other", "user", False),
    ("other", "moderator", False),
    ("other", "admin", True),
])
def test_can_delete(caller, role, expected):
    assert can_delete(caller, role, "author") is expected

def test_ensure_helpers_raise_forbidden():
    with pytest.raises(ForbiddenError):
        ensure_can_delete("other", Role.MODERATOR, "author")
    with pytest.raises(ForbiddenError):
        ensure_owner("admin-user", "author")
    ensure_owner("author", "author")
