# bhreads/models/user.py
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any

from bhreads.core.roles import Role
from bhreads.utils.datetime_utils import DateTimeUtils

DEFAULT_BIO = "🍞 Bread lover"
DEFAULT_FAVORITE_ITEM = "Sourdough"
BIO_MAX_LENGTH = 160


def default_avatar(username: str) -> str:
    """사용자명을 seed로 하는 기본 아바타 URL을 생성합니다."""
    return (
        "https://api.dicebear.com/7.x/avataaars/svg"
        f"?seed={username}&backgroundColor=b6e3f4,c0aede,d1d4f9"
    )


@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    password_hash 는 저장 전용 필드로, 어떤 응답 스키마에도 포함되지 않습니다.
    """
    user_id: str
    username: str
    email: str
    password_hash: str
    role: str = Role.USER.value
    avatar: str = ""
    bio: str = DEFAULT_BIO
    favorite_item: str = DEFAULT_FAVORITE_ITEM
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    last_active: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_user(username: str, email: str, password_hash: str, role: Role = Role.USER,
             avatar: Optional[str] = None, bio: Optional[str] = None,
             favorite_item: Optional[str] = None) -> User:
    """신규 사용자 엔티티를 생성합니다. 기본 아바타/소개/최애 빵은 여기서 채웁니다."""
    now = DateTimeUtils.now()
    return User(
        user_id=str(uuid.uuid4()),
        username=username.strip(),
        email=normalize_email(email),
        password_hash=password_hash,
        role=role.value,
        avatar=avatar or default_avatar(username.strip()),
        bio=bio or DEFAULT_BIO,
        favorite_item=favorite_item or DEFAULT_FAVORITE_ITEM,
        created_at=now,
        last_active=now,
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


def missing_profile_defaults(user_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    예전 문서에 누락된 프로필 필드의 기본값을 계산합니다.
    반환값이 비어 있으면 갱신할 필드가 없다는 뜻입니다.
    """
    updates: Dict[str, Any] = {}
    if not user_data.get('role'):
        updates['role'] = Role.USER.value
    if not user_data.get('avatar'):
        updates['avatar'] = default_avatar(user_data.get('username', ''))
    if not user_data.get('bio'):
        updates['bio'] = DEFAULT_BIO
    if not user_data.get('favorite_item'):
        updates['favorite_item'] = DEFAULT_FAVORITE_ITEM
    if not user_data.get('last_active'):
        updates['last_active'] = DateTimeUtils.now()
    return updates
