# bhreads/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple, List, Iterable, Callable

from firebase_admin import firestore

from bhreads.core.exceptions import NotFoundError, AlreadyRepostedError
from bhreads.core.roles import Role, ensure_can_delete, ensure_owner
from bhreads.models.comment import Comment
from bhreads.models.post import Post, new_post, new_repost, normalize_tags
from bhreads.utils.datetime_utils import DateTimeUtils, for_firestore

# 게시물 수정 시 변경을 허용하는 필드. 작성자/참여 필드는 수정 대상이 아닙니다.
EDITABLE_FIELDS = ('title', 'content', 'category', 'image_url', 'tags')


class PostService:
    """
    게시물 CRUD와 좋아요/리포스트 등 참여(engagement) 상태를 관리하는 서비스 클래스.

    - 좋아요/댓글/리포스트 변경은 Firestore 트랜잭션 안에서 읽고, 카운터를 다시 계산해 집합과 함께 기록합니다.
    - 작성자 정보는 저장하지 않고 조회 시 users 컬렉션에서 채워 넣습니다.
    """
    def __init__(self, db):
        self.db = db
        self.posts_ref = self.db.collection('posts')
        self.users_ref = self.db.collection('users')

    # --- 내부 헬퍼 ---
    def load_post(self, post_id: str) -> Tuple[Any, Post]:
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        return post_ref, Post.from_dict(doc.to_dict())

    def get_role(self, user_id: str) -> Role:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return Role.USER
        return Role.parse(doc.to_dict().get('role'))

    def apply_engagement(self, post_id: str, mutate: Callable[[Post], Any]) -> Tuple[Post, Any]:
        """
        트랜잭션 안에서 게시물을 읽고 mutate(post)를 적용한 뒤 카운터를 다시 계산해 기록합니다.
        mutate 가 예외를 던지면 아무것도 기록되지 않습니다. (post, mutate 반환값)을 반환합니다.
        """
        transaction = self.db.transaction()
        post_ref = self.posts_ref.document(post_id)

        @firestore.transactional
        def _apply(transaction):
            doc = post_ref.get(transaction=transaction)
            if not doc.exists:
                raise NotFoundError("게시물을 찾을 수 없습니다.")
            post = Post.from_dict(doc.to_dict())
            result = mutate(post)
            post.recompute_counts()
            transaction.update(post_ref, for_firestore(post.engagement_fields()))
            return post, result

        return _apply(transaction)

    def resolve_authors(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """작성자 ID 목록을 {user_id: 요약 정보} 딕셔너리로 변환합니다."""
        authors: Dict[str, Dict[str, Any]] = {}
        for user_id in set(user_ids):
            doc = self.users_ref.document(user_id).get()
            data = doc.to_dict() if doc.exists else {}
            authors[user_id] = {
                "user_id": user_id,
                "username": data.get('username'),
                "avatar": data.get('avatar'),
                "role": data.get('role'),
            }
        return authors

    def _author_ids(self, posts: List[Post]) -> List[str]:
        ids = []
        for post in posts:
            ids.append(post.author_id)
            ids.extend(c.author_id for c in post.comments)
        return ids

    def present_comment(self, comment: Comment, viewer_id: Optional[str],
                        authors: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        data = asdict(comment)
        data['author'] = authors.get(comment.author_id, {"user_id": comment.author_id})
        data['like_count'] = comment.like_count
        data['is_liked'] = bool(viewer_id) and viewer_id in comment.likes
        return data

    def present_comments(self, post: Post, viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        authors = self.resolve_authors(c.author_id for c in post.comments)
        return [self.present_comment(c, viewer_id, authors) for c in post.comments]

    def present(self, posts: List[Post], viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        """응답용 딕셔너리로 변환하며 조회자 기준의 좋아요/리포스트 여부를 채웁니다."""
        originals = self._load_originals(posts)
        authors = self.resolve_authors(
            self._author_ids(posts) + [o.author_id for o in originals.values()]
        )
        result = []
        for post in posts:
            data = post.to_dict()
            data['author'] = authors.get(post.author_id, {"user_id": post.author_id})
            data['comments'] = [self.present_comment(c, viewer_id, authors) for c in post.comments]
            data['is_liked'] = bool(viewer_id) and viewer_id in post.likes
            data['is_reposted'] = bool(viewer_id) and viewer_id in post.reposts
            original = originals.get(post.original_post_id)
            data['original_post'] = {
                "post_id": original.post_id,
                "title": original.title,
                "content": original.content,
                "author": authors.get(original.author_id, {"user_id": original.author_id}),
            } if original else None
            result.append(data)
        return result

    def _load_originals(self, posts: List[Post]) -> Dict[str, Post]:
        originals = {}
        for post in posts:
            if post.is_repost and post.original_post_id and post.original_post_id not in originals:
                doc = self.posts_ref.document(post.original_post_id).get()
                if doc.exists:
                    originals[post.original_post_id] = Post.from_dict(doc.to_dict())
        return originals

    # --- CRUD ---
    def create_post(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        post = new_post(
            author_id=user_id,
            title=data['title'],
            content=data['content'],
            category=data.get('category'),
            image_url=data.get('image_url'),
            tags=data.get('tags'),
        )
        try:
            self.posts_ref.document(post.post_id).set(for_firestore(post.to_dict()))
        except Exception as e:
            logging.error(f"게시물 생성 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise
        return self.present([post], user_id)[0]

    def _filtered_query(self, category: Optional[str], tag: Optional[str]):
        query = self.posts_ref
        if category:
            query = query.where('category', '==', category)
        if tag:
            query = query.where('tags', 'array_contains', tag.strip().lower())
        return query

    def get_posts(self, viewer_id: Optional[str], page: int = 1, limit: int = 10,
                  category: Optional[str] = None, tag: Optional[str] = None) -> Tuple[List[Dict[str, Any]], int]:
        """최신순으로 페이지 단위 게시물 목록과 전체 개수를 반환합니다."""
        total = self._count(self._filtered_query(category, tag))
        docs = (self._filtered_query(category, tag)
                .order_by('created_at', direction=firestore.Query.DESCENDING)
                .offset((page - 1) * limit)
                .limit(limit)
                .stream())
        posts = [Post.from_dict(doc.to_dict()) for doc in docs]
        return self.present(posts, viewer_id), total

    def get_post_by_id(self, post_id: str, viewer_id: Optional[str]) -> Dict[str, Any]:
        _, post = self.load_post(post_id)
        return self.present([post], viewer_id)[0]

    def update_post(self, post_id: str, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        post_ref, post = self.load_post(post_id)
        ensure_owner(user_id, post.author_id, "본인이 작성한 게시물만 수정할 수 있습니다.")

        update_data = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if 'tags' in update_data:
            update_data['tags'] = normalize_tags(update_data['tags'])
        update_data['updated_at'] = DateTimeUtils.now()
        post_ref.update(update_data)
        return self.get_post_by_id(post_id, user_id)

    def delete_post(self, post_id: str, user_id: str) -> None:
        """작성자 본인 또는 admin 만 삭제할 수 있습니다. 내장 댓글은 문서와 함께 삭제됩니다."""
        post_ref, post = self.load_post(post_id)
        ensure_can_delete(user_id, self.get_role(user_id), post.author_id,
                          "이 게시물을 삭제할 권한이 없습니다.")
        post_ref.delete()
        logging.info(f"게시물 삭제 완료 (post_id: {post_id}, by: {user_id})")

    # --- 참여(engagement) ---
    def toggle_post_like(self, user_id: str, post_id: str) -> Tuple[bool, int]:
        """좋아요를 누르거나 취소하고 (is_liked, like_count)를 반환합니다."""
        try:
            post, is_liked = self.apply_engagement(post_id, lambda post: post.toggle_like(user_id))
        except NotFoundError:
            raise
        except Exception as e:
            logging.error(f"게시물 좋아요 토글 실패 (user_id: {user_id}, post_id: {post_id}): {e}", exc_info=True)
            raise
        return is_liked, post.like_count

    def repost(self, user_id: str, post_id: str) -> Dict[str, Any]:
        """
        원본을 복사한 새 게시물을 만들고 원본의 리포스트 집합에 사용자를 추가합니다.
        두 단계는 하나의 트랜잭션이 아니며, 두 번째 단계가 실패하면 생성한 리포스트를 삭제합니다.
        """
        _, original = self.load_post(post_id)
        if original.has_reposted(user_id):
            raise AlreadyRepostedError()

        repost = new_repost(original, user_id)
        repost_ref = self.posts_ref.document(repost.post_id)
        repost_ref.set(for_firestore(repost.to_dict()))

        def add_repost(post: Post):
            # 동시에 들어온 같은 사용자의 리포스트는 트랜잭션 안에서 다시 거릅니다.
            if post.has_reposted(user_id):
                raise AlreadyRepostedError()
            post.add_repost(user_id)

        try:
            self.apply_engagement(post_id, add_repost)
        except AlreadyRepostedError:
            repost_ref.delete()
            raise
        except Exception as e:
            logging.error(f"원본 리포스트 집합 갱신 실패, 생성한 리포스트를 되돌립니다 (post_id: {post_id}): {e}", exc_info=True)
            repost_ref.delete()
            raise

        return self.present([repost], user_id)[0]

    # --- 집계 ---
    def _count(self, query) -> int:
        count_result = query.count().get()
        return count_result[0][0].value

    def count_posts_by_user_id(self, author_id: str) -> int:
        """특정 사용자가 작성한 게시물의 총 개수를 반환합니다."""
        try:
            return self._count(self.posts_ref.where('author_id', '==', author_id))
        except Exception as e:
            logging.error(f"사용자 게시물 수 집계 실패 (author_id: {author_id}): {e}", exc_info=True)
            return 0
