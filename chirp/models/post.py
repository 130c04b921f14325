# chirp/models/post.py
from dataclasses import dataclass, field
from datetime import datetime, timezone

from chirp.models.user import Author


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    생성 이후에는 수정되지 않습니다.
    """
    post_id: str
    content: str
    author_id: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class PostWithAuthor:
    """피드 응답 전용 형태. 저장되지 않습니다."""
    post: Post
    author: Author
