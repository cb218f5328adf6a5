# bhreads/models/post.py
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from bhreads.models.comment import Comment
from bhreads.utils.datetime_utils import DateTimeUtils

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000
REPOST_TITLE_PREFIX = "Repost: "


class Category(Enum):
    """게시물 분류 태그"""
    SOURDOUGH = "sourdough"
    BAGUETTE = "baguette"
    CROISSANT = "croissant"
    BRIOCHE = "brioche"
    CIABATTA = "ciabatta"
    RYE = "rye"
    OTHER = "other"


def toggle_membership(members: List[str], user_id: str) -> bool:
    """
    집합 의미의 리스트에서 user_id를 추가하거나 제거합니다.
    반환값은 토글 이후의 포함 여부입니다.
    """
    if user_id in members:
        members.remove(user_id)
        return False
    members.append(user_id)
    return True


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """태그를 소문자/공백 제거 후 순서를 유지한 채 중복 없이 반환합니다."""
    normalized: List[str] = []
    for tag in tags or []:
        value = str(tag).strip().lower()
        if value and value not in normalized:
            normalized.append(value)
    return normalized


@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.

    like_count / comment_count / repost_count 는 각각 likes / comments / reposts 의
    크기이며, 변경 후에는 항상 recompute_counts()로 다시 계산합니다.
    """
    post_id: str
    title: str
    content: str
    author_id: str
    likes: List[str] = field(default_factory=list)
    like_count: int = 0
    comments: List[Comment] = field(default_factory=list)
    comment_count: int = 0
    reposts: List[str] = field(default_factory=list)
    repost_count: int = 0
    is_repost: bool = False
    original_post_id: Optional[str] = None
    category: str = Category.OTHER.value
    image_url: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Post':
        post = cls(
            post_id=data['post_id'],
            title=data.get('title', ''),
            content=data.get('content', ''),
            author_id=data.get('author_id', ''),
            likes=list(data.get('likes') or []),
            comments=[Comment.from_dict(c) for c in data.get('comments') or []],
            reposts=list(data.get('reposts') or []),
            is_repost=bool(data.get('is_repost', False)),
            original_post_id=data.get('original_post_id'),
            category=data.get('category') or Category.OTHER.value,
            image_url=data.get('image_url') or "",
            tags=list(data.get('tags') or []),
            created_at=DateTimeUtils.from_firestore(data.get('created_at') or DateTimeUtils.now()),
            updated_at=DateTimeUtils.from_firestore(data.get('updated_at') or DateTimeUtils.now()),
        )
        post.recompute_counts()
        return post

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def recompute_counts(self):
        self.like_count = len(self.likes)
        self.comment_count = len(self.comments)
        self.repost_count = len(self.reposts)

    def engagement_fields(self) -> Dict[str, Any]:
        """참여 관련 필드만 추려 부분 업데이트용 딕셔너리로 반환합니다."""
        return {
            'likes': list(self.likes),
            'like_count': self.like_count,
            'comments': [asdict(c) for c in self.comments],
            'comment_count': self.comment_count,
            'reposts': list(self.reposts),
            'repost_count': self.repost_count,
        }

    # --- 참여(engagement) 연산 ---
    def toggle_like(self, user_id: str) -> bool:
        is_liked = toggle_membership(self.likes, user_id)
        self.recompute_counts()
        return is_liked

    def add_comment(self, comment: Comment):
        self.comments.append(comment)
        self.recompute_counts()

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        return next((c for c in self.comments if c.comment_id == comment_id), None)

    def remove_comment(self, comment_id: str) -> bool:
        before = len(self.comments)
        self.comments = [c for c in self.comments if c.comment_id != comment_id]
        self.recompute_counts()
        return len(self.comments) != before

    def toggle_comment_like(self, comment_id: str, user_id: str) -> Optional[bool]:
        comment = self.find_comment(comment_id)
        if comment is None:
            return None
        is_liked = toggle_membership(comment.likes, user_id)
        comment.updated_at = DateTimeUtils.now()
        return is_liked

    def has_reposted(self, user_id: str) -> bool:
        return user_id in self.reposts

    def add_repost(self, user_id: str):
        if user_id not in self.reposts:
            self.reposts.append(user_id)
        self.recompute_counts()


def new_post(author_id: str, title: str, content: str, category: Optional[str] = None,
             image_url: Optional[str] = None, tags: Optional[List[str]] = None,
             is_repost: bool = False, original_post_id: Optional[str] = None) -> Post:
    """신규 게시물 엔티티를 생성합니다."""
    now = DateTimeUtils.now()
    post = Post(
        post_id=str(uuid.uuid4()),
        title=title,
        content=content,
        author_id=author_id,
        category=category or Category.OTHER.value,
        image_url=image_url or "",
        tags=normalize_tags(tags),
        is_repost=is_repost,
        original_post_id=original_post_id,
        created_at=now,
        updated_at=now,
    )
    post.recompute_counts()
    return post


def new_repost(original: Post, reposter_id: str) -> Post:
    """원본 게시물을 복사한 리포스트 엔티티를 생성합니다."""
    title = f"{REPOST_TITLE_PREFIX}{original.title}"[:TITLE_MAX_LENGTH]
    return new_post(
        author_id=reposter_id,
        title=title,
        content=original.content,
        category=original.category,
        image_url=original.image_url,
        tags=list(original.tags),
        is_repost=True,
        original_post_id=original.post_id,
    )
