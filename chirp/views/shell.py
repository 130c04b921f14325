# chirp/views/shell.py
from typing import Optional, Tuple

from flask import render_template

from chirp.client import QueryResult
from chirp.views.composer import PostComposer
from chirp.views.context import ChirpContext
from chirp.views.feed import FeedView
from chirp.views.post_view import PostView


class PageShell:
    """
    홈 화면 레이아웃.
    로그인 전: 로그인 버튼 / 로그인 후: 사용자 바 + 인사 + 로그아웃 + 작성기. 그 아래 피드.
    """
    def __init__(self, ctx: ChirpContext, composer: Optional[PostComposer] = None):
        self.ctx = ctx
        # 피드 데이터를 먼저 요청해 둡니다. FeedView 는 같은 캐시 결과를 읽습니다.
        ctx.client.posts.get_all.query()
        self.composer = composer
        if self.composer is None and ctx.session.is_signed_in:
            self.composer = PostComposer(ctx)
        self.feed = FeedView.load(ctx.client)

    def render(self, status: int = 200) -> Tuple[str, int]:
        return render_template('index.html', shell=self, session=self.ctx.session, ctx=self.ctx), status


class PostPage:
    """/post/<post_id> 단일 게시글 페이지."""

    def __init__(self, result: QueryResult):
        self.result = result

    def render(self) -> Tuple[str, int]:
        if self.result.is_loading:
            return render_template('loading_page.html'), 200
        if self.result.data is None:
            return render_template('not_found.html'), 404
        return render_template('post.html', view=PostView(self.result.data)), 200
