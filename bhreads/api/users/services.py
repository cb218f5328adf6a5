# bhreads/api/users/services.py
import logging
from typing import Optional, Dict, Any

from bhreads.api.posts.services import PostService
from bhreads.core.exceptions import NotFoundError

# 프로필 수정으로 바꿀 수 있는 필드 목록. password_hash 등은 여기에 절대 포함되지 않습니다.
PROFILE_FIELDS = ('avatar', 'bio', 'favorite_item')


class UserService:
    """
    사용자 프로필 관련 비즈니스 로직을 담당하는 서비스 클래스.
    게시물 수 집계는 주입받은 PostService에 위임합니다.
    """
    def __init__(self, db, post_service: PostService):
        self.db = db
        self.users_ref = self.db.collection('users')
        self.post_service = post_service

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        if doc.exists:
            return doc.to_dict()
        return None

    def get_user_profile(self, user_id: str) -> Dict[str, Any]:
        """공개 프로필 정보와 총 게시물 수를 함께 조회합니다."""
        user_data = self.get_user_by_id(user_id)
        if not user_data:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        user_data['post_count'] = self.post_service.count_posts_by_user_id(user_id)
        return user_data

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        전달된 필드만 반영합니다. 빈 값은 무시합니다.
        :param changes: avatar / bio / favorite_item 중 일부
        """
        user_ref = self.users_ref.document(user_id)
        if not user_ref.get().exists:
            raise NotFoundError("사용자를 찾을 수 없습니다.")

        update_data = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v}
        if update_data:
            try:
                user_ref.update(update_data)
            except Exception as e:
                logging.error(f"프로필 업데이트 실패 (user_id: {user_id}): {e}", exc_info=True)
                raise
        return user_ref.get().to_dict()
