# chirp/models/user.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID 는 인증 제공자의 uid 와 같습니다.
    """
    user_id: str
    username: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    join_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Author:
    """게시글/프로필 응답에 노출되는 공개 사용자 정보."""
    id: str
    username: str
    profile_picture: Optional[str] = None


@dataclass
class Session:
    """현재 요청의 로그인 상태. 인증 제공자가 발급한 세션 쿠키에서 읽어옵니다."""
    id: Optional[str] = None
    full_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    @property
    def is_signed_in(self) -> bool:
        return self.id is not None

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()
