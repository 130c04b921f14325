# chirp/views/post_view.py
from datetime import datetime
from typing import Optional

from flask import render_template
from markupsafe import Markup

from chirp.models.post import PostWithAuthor
from chirp.utils.datetime_utils import DateTimeUtils


class PostView:
    """게시글 하나를 작성자 정보와 함께 그리는 순수 렌더링 컴포넌트."""

    def __init__(self, item: PostWithAuthor, now: Optional[datetime] = None):
        self.post = item.post
        self.author = item.author
        self._now = now

    @property
    def key(self) -> str:
        return self.post.post_id

    @property
    def author_url(self) -> str:
        return f"/@{self.author.username}"

    @property
    def permalink(self) -> str:
        return f"/post/{self.post.post_id}"

    @property
    def relative_time(self) -> str:
        return DateTimeUtils.from_now(self.post.created_at, self._now)

    def render(self) -> Markup:
        return Markup(render_template('partials/post_view.html', view=self))
