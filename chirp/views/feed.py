# chirp/views/feed.py
from datetime import datetime
from typing import List, Optional

from flask import render_template
from markupsafe import Markup

from chirp.client import ChirpClient, QueryResult
from chirp.views.post_view import PostView


class FeedView:
    """
    posts.getAll 결과를 그리는 피드.
    loading -> 로딩 표시, 데이터 -> 서버가 준 순서대로 PostView, 데이터 없음 -> 실패 메시지.
    """
    FAILURE_MESSAGE = "Something went wrong..."

    def __init__(self, result: QueryResult, now: Optional[datetime] = None):
        self.result = result
        self._now = now

    @classmethod
    def load(cls, client: ChirpClient, now: Optional[datetime] = None) -> "FeedView":
        return cls(client.posts.get_all.query(), now=now)

    @property
    def state(self) -> str:
        if self.result.is_loading:
            return 'loading'
        if self.result.data is None:
            return 'error'
        return 'data'

    @property
    def items(self) -> List[PostView]:
        if self.state != 'data':
            return []
        return [PostView(item, now=self._now) for item in self.result.data]

    def render(self) -> Markup:
        return Markup(render_template('partials/feed.html', feed=self))
