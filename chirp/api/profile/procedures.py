# chirp/api/profile/procedures.py
from chirp.api.profile.schemas import AuthorSchema, UsernameQuerySchema
from chirp.api.router import procedure, ProcedureContext, QUERY


@procedure('profile.getUserByUsername', kind=QUERY, input_schema=UsernameQuerySchema(),
           output_schema=AuthorSchema())
def get_user_by_username(ctx: ProcedureContext, data):
    # 사용자가 없으면 null 을 반환하고, 화면에서 404 로 처리합니다.
    return ctx.services['users'].get_user_by_username(data['username'])
