# chirp/views/profile.py
from typing import Tuple

from flask import render_template

from chirp.client import ChirpClient, QueryResult


class ProfilePage:
    """사용자명으로 공개 프로필을 조회해 그리는 페이지."""

    def __init__(self, username: str, result: QueryResult):
        self.username = username
        self.result = result

    @staticmethod
    def username_from_slug(slug: str) -> str:
        """/@{username} 형태의 경로에서 사용자명을 꺼냅니다."""
        return slug[1:] if slug.startswith('@') else slug

    @classmethod
    def load(cls, client: ChirpClient, slug: str) -> "ProfilePage":
        username = cls.username_from_slug(slug)
        return cls(username, client.profile.get_user_by_username.query({'username': username}))

    @property
    def state(self) -> str:
        if self.result.is_loading:
            return 'loading'
        if self.result.data is None:
            return 'not_found'
        return 'data'

    def render(self) -> Tuple[str, int]:
        state = self.state
        if state == 'loading':
            return render_template('loading_page.html'), 200
        if state == 'not_found':
            return render_template('not_found.html'), 404
        return render_template('profile.html', user=self.result.data), 200
