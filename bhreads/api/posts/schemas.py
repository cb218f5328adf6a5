# bhreads/api/posts/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from bhreads.models.post import Category, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH, CONTENT_MAX_LENGTH

CATEGORY_CHOICES = [c.value for c in Category]


# --- 재사용을 위한 중첩 스키마 ---
class AuthorSchema(Schema):
    """게시물/댓글 응답에 포함될 작성자 요약 정보."""
    id = fields.Str(attribute='user_id')
    username = fields.Str(allow_none=True)
    avatar = fields.Str(allow_none=True)
    role = fields.Str(allow_none=True)

class CommentResponseSchema(Schema):
    id = fields.Str(attribute='comment_id')
    content = fields.Str()
    author = fields.Nested(AuthorSchema)
    likes = fields.List(fields.Str())
    like_count = fields.Int(data_key='likeCount')
    is_liked = fields.Bool(data_key='isLiked', dump_default=False)
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')

class OriginalPostSchema(Schema):
    """리포스트가 가리키는 원본 게시물 요약."""
    id = fields.Str(attribute='post_id')
    title = fields.Str()
    content = fields.Str()
    author = fields.Nested(AuthorSchema)


# --- API 요청/응답 스키마 ---
class PostCreateSchema(Schema):
    """POST /api/posts 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=TITLE_MIN_LENGTH, max=TITLE_MAX_LENGTH))
    content = fields.Str(required=True, validate=validate.Length(min=1, max=CONTENT_MAX_LENGTH))
    category = fields.Str(validate=validate.OneOf(CATEGORY_CHOICES))
    image_url = fields.Str(data_key='imageUrl', validate=validate.Length(max=2048))
    tags = fields.List(fields.Str(validate=validate.Length(max=50)), validate=validate.Length(max=20))

class PostUpdateSchema(PostCreateSchema):
    """PUT /api/posts/{post_id}. 전달된 필드만 검사/반영합니다 (partial load)."""

class PostResponseSchema(Schema):
    """게시물 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    id = fields.Str(attribute='post_id', dump_only=True)
    title = fields.Str()
    content = fields.Str()
    author = fields.Nested(AuthorSchema)
    likes = fields.List(fields.Str())
    like_count = fields.Int(data_key='likeCount')
    comments = fields.List(fields.Nested(CommentResponseSchema))
    comment_count = fields.Int(data_key='commentCount')
    reposts = fields.List(fields.Str())
    repost_count = fields.Int(data_key='repostCount')
    is_repost = fields.Bool(data_key='isRepost')
    original_post = fields.Nested(OriginalPostSchema, data_key='originalPost', allow_none=True)
    category = fields.Str()
    image_url = fields.Str(data_key='imageUrl')
    tags = fields.List(fields.Str())
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
    is_liked = fields.Bool(data_key='isLiked', dump_default=False)
    is_reposted = fields.Bool(data_key='isReposted', dump_default=False)
