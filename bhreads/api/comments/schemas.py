# bhreads/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE, pre_load

from bhreads.models.comment import COMMENT_MAX_LENGTH


class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    길이 제한은 앞뒤 공백을 제거한 내용에 적용됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    content = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=COMMENT_MAX_LENGTH, error="댓글은 1~500자 사이여야 합니다.")
    )

    @pre_load
    def strip_content(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('content'), str):
            data = dict(data)
            data['content'] = data['content'].strip()
        return data
