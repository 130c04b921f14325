# chirp/api/posts/schemas.py
from flask import current_app
from marshmallow import Schema, fields, validate, validates, post_load, ValidationError, EXCLUDE

from chirp.api.fields import UtcDateTime
from chirp.api.profile.schemas import AuthorSchema
from chirp.models.post import Post, PostWithAuthor

# --- API 요청 스키마 ---

class PostCreateSchema(Schema):
    """posts.create 요청 본문의 유효성을 검사합니다."""
    content = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="Post content can't be empty."),
        error_messages={"required": "Post content is required."}
    )

    @validates('content')
    def validate_content_length(self, value, **kwargs):
        # 최대 길이는 설정값(POST_MAX_LENGTH)을 따릅니다.
        max_length = current_app.config['POST_MAX_LENGTH']
        if len(value) > max_length:
            raise ValidationError(f"Post content must be at most {max_length} characters.")
        if not value.strip():
            raise ValidationError("Post content can't be blank.")


class PostIdSchema(Schema):
    """posts.getById 입력 스키마."""
    post_id = fields.Str(required=True, validate=validate.Length(min=1))

# --- API 응답 스키마 ---
# 데이터 클라이언트도 같은 스키마로 응답을 읽어 데이터클래스로 변환합니다.

class PostSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    post_id = fields.Str(required=True)
    content = fields.Str(required=True)
    author_id = fields.Str(required=True)
    created_at = UtcDateTime(required=True)

    @post_load
    def make_post(self, data, **kwargs):
        return Post(**data)


class PostWithAuthorSchema(Schema):
    """피드 항목 응답: {post, author}"""
    class Meta:
        unknown = EXCLUDE

    post = fields.Nested(PostSchema, required=True)
    author = fields.Nested(AuthorSchema, required=True)

    @post_load
    def make_post_with_author(self, data, **kwargs):
        return PostWithAuthor(**data)
