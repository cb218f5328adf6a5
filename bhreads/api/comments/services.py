# bhreads/api/comments/services.py
import logging
from typing import Dict, Any, List, Tuple

from bhreads.api.posts.services import PostService
from bhreads.core.exceptions import InvalidInputError, NotFoundError
from bhreads.core.roles import ensure_can_delete
from bhreads.models.comment import new_comment
from bhreads.models.post import Post


class CommentService:
    """
    게시물에 내장된 댓글을 다루는 서비스 클래스.
    댓글은 독립된 컬렉션이 없으므로 모든 연산은 posts 문서를 트랜잭션 안에서 읽고 다시 씁니다.
    """
    def __init__(self, post_service: PostService):
        self.post_service = post_service

    def create_comment(self, post_id: str, author_id: str, content: str) -> List[Dict[str, Any]]:
        """댓글을 추가하고 갱신된 전체 댓글 목록(오래된 순)을 반환합니다."""
        content = (content or "").strip()
        if not content:
            raise InvalidInputError("댓글은 비어 있을 수 없습니다.")

        try:
            post, _ = self.post_service.apply_engagement(
                post_id, lambda post: post.add_comment(new_comment(author_id, content))
            )
        except NotFoundError:
            raise
        except Exception as e:
            logging.error(f"댓글 생성 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise
        return self.post_service.present_comments(post, author_id)

    def toggle_comment_like(self, user_id: str, post_id: str, comment_id: str) -> Tuple[bool, int]:
        def toggle(post: Post) -> bool:
            is_liked = post.toggle_comment_like(comment_id, user_id)
            if is_liked is None:
                raise NotFoundError("댓글을 찾을 수 없습니다.")
            return is_liked

        post, is_liked = self.post_service.apply_engagement(post_id, toggle)
        return is_liked, post.find_comment(comment_id).like_count

    def delete_comment(self, user_id: str, post_id: str, comment_id: str) -> List[Dict[str, Any]]:
        """댓글 작성자 본인 또는 admin 만 삭제할 수 있습니다."""
        role = self.post_service.get_role(user_id)

        def remove(post: Post):
            comment = post.find_comment(comment_id)
            if comment is None:
                raise NotFoundError("댓글을 찾을 수 없습니다.")
            ensure_can_delete(user_id, role, comment.author_id, "댓글을 삭제할 권한이 없습니다.")
            post.remove_comment(comment_id)

        post, _ = self.post_service.apply_engagement(post_id, remove)
        return self.post_service.present_comments(post, user_id)
