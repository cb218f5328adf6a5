# bhreads/api/auth/services.py
import logging
from typing import Dict, Any, Tuple, Optional

from bhreads.core.config import Settings
from bhreads.core.exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from bhreads.core.roles import Role, is_admin, is_moderator
from bhreads.core.security import TokenService, PasswordHasher
from bhreads.models.user import new_user, normalize_email, missing_profile_defaults
from bhreads.utils.datetime_utils import DateTimeUtils, for_firestore


class AuthService:
    """
    회원가입, 로그인, 현재 사용자 조회를 담당하는 서비스 클래스.
    비밀번호 해시는 계정 생성 시 정확히 한 번만 계산됩니다.
    """
    def __init__(self, db, settings: Settings, token_service: TokenService):
        self.db = db
        self.users_ref = self.db.collection('users')
        self.settings = settings
        self.token_service = token_service
        self.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    def _find_one(self, field: str, value: str) -> Optional[Dict[str, Any]]:
        query = self.users_ref.where(field, '==', value).limit(1).stream()
        user_doc = next(query, None)
        return user_doc.to_dict() if user_doc else None

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self._find_one('email', normalize_email(email))

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self._find_one('username', username.strip())

    def register(self, username: str, email: str, password: str,
                 role: Role = Role.USER) -> Tuple[Dict[str, Any], str]:
        """신규 사용자를 생성하고 (사용자 데이터, 토큰)을 반환합니다."""
        if self.find_by_email(email) or self.find_by_username(username):
            raise ConflictError("이미 사용 중인 이메일 또는 사용자명입니다.")

        user = new_user(
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        user_data = for_firestore(user.to_dict())
        try:
            self.users_ref.document(user.user_id).set(user_data)
        except Exception as e:
            logging.error(f"사용자 생성 실패 (username: {username}): {e}", exc_info=True)
            raise

        logging.info(f"신규 사용자 가입 완료 (user_id: {user.user_id})")
        return user_data, self.token_service.issue(user.user_id)

    def authenticate(self, email: str, password: str) -> Tuple[Dict[str, Any], str]:
        """
        이메일/비밀번호를 검증합니다.
        이메일이 없는 경우와 비밀번호가 틀린 경우를 구분하지 않고 동일한 오류를 냅니다.
        """
        user_data = self.find_by_email(email)
        if not user_data or not self.hasher.verify(password, user_data.get('password_hash')):
            raise InvalidCredentialsError()

        updates = missing_profile_defaults(user_data)
        updates['last_active'] = DateTimeUtils.now()
        self.users_ref.document(user_data['user_id']).update(updates)
        user_data.update(updates)

        return user_data, self.token_service.issue(user_data['user_id'])

    def get_user(self, user_id: str) -> Dict[str, Any]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        return doc.to_dict()

    def get_role_info(self, user_id: str) -> Dict[str, Any]:
        role = Role.parse(self.get_user(user_id).get('role'))
        return {
            "role": role.value,
            "is_admin": is_admin(role),
            "is_moderator": is_moderator(role),
        }

    def ensure_admin(self, username: str, email: str, password: str) -> Tuple[Dict[str, Any], bool]:
        """
        관리자 계정을 만들거나, 이미 있는 계정을 관리자로 승격합니다.
        반환값의 두 번째 항목은 새로 생성되었는지 여부입니다.
        """
        existing = self.find_by_email(email)
        if existing is None:
            user_data, _ = self.register(username, email, password, role=Role.ADMIN)
            return user_data, True
        if not is_admin(existing.get('role')):
            existing = self.promote_to_admin(email)
        return existing, False

    def promote_to_admin(self, email: str) -> Dict[str, Any]:
        user_data = self.find_by_email(email)
        if not user_data:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        self.users_ref.document(user_data['user_id']).update({'role': Role.ADMIN.value})
        user_data['role'] = Role.ADMIN.value
        logging.info(f"사용자 관리자 승격 완료 (user_id: {user_data['user_id']})")
        return user_data
