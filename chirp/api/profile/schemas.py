# chirp/api/profile/schemas.py
from marshmallow import Schema, fields, validate, post_load, EXCLUDE

from chirp.models.user import Author


class AuthorSchema(Schema):
    """
    게시글/프로필 응답에 포함될 공개 사용자 정보 스키마.
    이메일 등 민감한 정보는 제외합니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    username = fields.Str(required=True)
    profile_picture = fields.Str(allow_none=True, load_default=None)

    @post_load
    def make_author(self, data, **kwargs):
        return Author(**data)


class UsernameQuerySchema(Schema):
    """profile.getUserByUsername 입력 스키마."""
    username = fields.Str(required=True, validate=validate.Length(min=1, max=64))
