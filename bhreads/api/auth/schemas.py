# bhreads/api/auth/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE, pre_load

from bhreads.core.security import PasswordHasher


class RegisterSchema(Schema):
    """POST /api/auth/register 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(required=True, validate=validate.Length(min=3, max=30))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))

    @validates('password')
    def validate_password_bytes(self, value, **kwargs):
        # bcrypt 는 문자 수가 아니라 UTF-8 바이트 수로 제한합니다.
        if len(value.encode('utf-8')) > PasswordHasher.MAX_PASSWORD_BYTES:
            raise ValidationError("비밀번호는 72바이트를 넘을 수 없습니다.")

    @pre_load
    def strip_strings(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            for key in ('username', 'email'):
                if isinstance(data.get(key), str):
                    data[key] = data[key].strip()
        return data


class LoginSchema(Schema):
    """POST /api/auth/login 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))


class UserPrivateResponseSchema(Schema):
    """본인에게만 반환되는 사용자 정보. password_hash 는 어떤 경우에도 포함하지 않습니다."""
    id = fields.Str(attribute='user_id', dump_only=True)
    username = fields.Str()
    email = fields.Str()
    avatar = fields.Str()
    role = fields.Str()
    bio = fields.Str()
    favorite_item = fields.Str(data_key='favoriteItem')
    created_at = fields.DateTime(data_key='createdAt')
    last_active = fields.DateTime(data_key='lastActive')


class RoleResponseSchema(Schema):
    role = fields.Str()
    is_admin = fields.Bool(data_key='isAdmin')
    is_moderator = fields.Bool(data_key='isModerator')
