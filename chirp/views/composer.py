# chirp/views/composer.py
import logging
from typing import Optional

from flask import render_template
from markupsafe import Markup

from chirp.client import ApiError
from chirp.views.context import ChirpContext

IDLE = 'idle'
EDITING = 'editing'
SUBMITTING = 'submitting'


class PostComposer:
    """
    게시글 작성기.

    상태: idle(빈 입력) / editing(입력 중) / submitting(전송 중)
    - 성공: 입력을 비우고 posts.getAll 을 무효화합니다. (미리 피드에 끼워 넣지 않습니다)
    - 실패: 입력을 유지하고 오류 메시지를 남깁니다.
      content 필드 검증 메시지가 있으면 첫 번째 메시지, 없으면 GENERIC_ERROR.
    """
    SUBMIT_KEY = 'Enter'
    GENERIC_ERROR = "Failed to post! Please try again later."
    PLACEHOLDER = "Type some emojis :)"

    def __init__(self, ctx: ChirpContext):
        self.ctx = ctx
        self.input = ''
        self.error: Optional[str] = None
        self._mutation = ctx.client.posts.create.mutation(
            on_success=self._on_success,
            on_error=self._on_error
        )

    @property
    def is_posting(self) -> bool:
        return self._mutation.is_loading

    @property
    def state(self) -> str:
        if self.is_posting:
            return SUBMITTING
        return EDITING if self.input else IDLE

    @property
    def can_submit(self) -> bool:
        return self.input != '' and not self.is_posting

    def change(self, value: str) -> None:
        self.input = value

    def click(self) -> bool:
        """'Post' 버튼. 버튼은 입력이 있고 전송 중이 아닐 때만 보입니다."""
        return self._submit()

    def key_down(self, key: str) -> bool:
        if key != self.SUBMIT_KEY:
            return False
        return self._submit()

    def _submit(self) -> bool:
        if not self.can_submit:
            return False
        self.error = None
        return self._mutation.mutate({'content': self.input})

    def _on_success(self, _post) -> None:
        self.input = ''
        self.ctx.client.posts.get_all.invalidate()

    def _on_error(self, error: ApiError) -> None:
        messages = error.field_errors('content')
        self.error = messages[0] if messages else self.GENERIC_ERROR
        logging.info(f"게시글 작성 실패: {error.error_code} {error.message}")

    def render(self) -> Markup:
        # 로그인하지 않은 경우 작성기는 아예 그리지 않습니다.
        if not self.ctx.session.is_signed_in:
            return Markup('')
        return Markup(render_template('partials/composer.html', composer=self, ctx=self.ctx))
