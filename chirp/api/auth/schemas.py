# chirp/api/auth/schemas.py
from marshmallow import Schema, fields, validate


class SessionLoginSchema(Schema):
    """로그인 요청의 유효성을 검사하는 스키마"""
    id_token = fields.Str(
        required=True,
        validate=validate.Length(min=1),
        metadata={"description": "인증 제공자가 발급한 ID 토큰"}
    )
