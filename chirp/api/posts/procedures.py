# chirp/api/posts/procedures.py
from chirp.api.errors import NotFound
from chirp.api.posts.schemas import PostCreateSchema, PostIdSchema, PostSchema, PostWithAuthorSchema
from chirp.api.router import procedure, ProcedureContext, QUERY, MUTATION


@procedure('posts.getAll', kind=QUERY, output_schema=PostWithAuthorSchema(many=True))
def get_all(ctx: ProcedureContext, _input):
    """최신 게시글 피드(작성자 정보 포함)를 반환합니다. 비로그인 사용자도 조회할 수 있습니다."""
    return ctx.services['posts'].get_all()


@procedure('posts.getById', kind=QUERY, input_schema=PostIdSchema(), output_schema=PostWithAuthorSchema())
def get_by_id(ctx: ProcedureContext, data):
    post = ctx.services['posts'].get_by_id(data['post_id'])
    if post is None:
        raise NotFound("Post not found.")
    return post


@procedure('posts.create', kind=MUTATION, input_schema=PostCreateSchema(), output_schema=PostSchema(),
           protected=True)
def create(ctx: ProcedureContext, data):
    """
    로그인한 사용자의 게시글을 생성합니다.
    - 내용 검증 실패 시 VALIDATION_ERROR(details.content)
    - 작성 빈도 제한 초과 시 TOO_MANY_REQUESTS
    """
    return ctx.services['posts'].create_post(ctx.session.id, data['content'])
