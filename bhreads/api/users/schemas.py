# bhreads/api/users/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from bhreads.models.user import BIO_MAX_LENGTH


class ProfileUpdateSchema(Schema):
    """PUT /api/users/profile 요청 본문. 모든 필드는 선택입니다."""
    class Meta:
        unknown = EXCLUDE

    avatar = fields.Str(validate=validate.Length(max=2048))
    bio = fields.Str(validate=validate.Length(max=BIO_MAX_LENGTH))
    favorite_item = fields.Str(data_key='favoriteItem', validate=validate.Length(max=100))


class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자에게 보여줄 공개 프로필. email 과 password_hash 는 제외합니다.
    """
    id = fields.Str(attribute='user_id', dump_only=True)
    username = fields.Str()
    avatar = fields.Str()
    bio = fields.Str()
    favorite_item = fields.Str(data_key='favoriteItem')
    role = fields.Str()
    created_at = fields.DateTime(data_key='createdAt')
    post_count = fields.Int(data_key='postCount')


class UserProfileResponseSchema(UserPublicResponseSchema):
    """프로필 수정 후 본인에게 반환하는 응답."""
    class Meta:
        exclude = ('post_count',)
