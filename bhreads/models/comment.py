# bhreads/models/comment.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any

from bhreads.utils.datetime_utils import DateTimeUtils

COMMENT_MAX_LENGTH = 500


@dataclass
class Comment:
    """
    Post 문서의 'comments' 배열에 내장되는 댓글 구조.
    독립된 컬렉션이 없으며 게시물과 함께 생성/삭제됩니다.
    """
    comment_id: str
    content: str
    author_id: str
    likes: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Comment':
        return cls(
            comment_id=data['comment_id'],
            content=data.get('content', ''),
            author_id=data.get('author_id', ''),
            likes=list(data.get('likes') or []),
            created_at=DateTimeUtils.from_firestore(data.get('created_at') or DateTimeUtils.now()),
            updated_at=DateTimeUtils.from_firestore(data.get('updated_at') or DateTimeUtils.now()),
        )


def new_comment(author_id: str, content: str) -> Comment:
    now = DateTimeUtils.now()
    return Comment(
        comment_id=str(uuid.uuid4()),
        content=content,
        author_id=author_id,
        likes=[],
        created_at=now,
        updated_at=now,
    )
