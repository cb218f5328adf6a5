# bhreads/core/roles.py
"""
3단계 역할 모델: user < moderator < admin

moderator는 현재 라벨 외에 추가 권한이 없습니다.
삭제 시 소유권 검사를 우회할 수 있는 것은 admin 뿐입니다.
"""
from enum import Enum
from functools import total_ordering

from bhreads.core.exceptions import ForbiddenError


@total_ordering
class Role(Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value) -> 'Role':
        """알 수 없거나 비어 있는 값은 USER로 취급합니다."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.USER


_RANKS = {Role.USER: 0, Role.MODERATOR: 1, Role.ADMIN: 2}


def is_admin(role) -> bool:
    return Role.parse(role) is Role.ADMIN


def is_moderator(role) -> bool:
    return Role.parse(role) >= Role.MODERATOR


def can_delete(caller_id: str, caller_role, author_id: str) -> bool:
    return caller_id == author_id or is_admin(caller_role)


def ensure_can_delete(caller_id: str, caller_role, author_id: str, message: str | None = None):
    if not can_delete(caller_id, caller_role, author_id):
        raise ForbiddenError(message or "삭제 권한이 없습니다.")


def ensure_owner(caller_id: str, author_id: str, message: str | None = None):
    if caller_id != author_id:
        raise ForbiddenError(message or "본인이 작성한 글만 수정할 수 있습니다.")
