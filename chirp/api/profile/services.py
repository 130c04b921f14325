# chirp/api/profile/services.py
import logging
from typing import Optional, Dict, Iterable

from firebase_admin import firestore

from chirp.models.user import Author


class UserService:
    """
    공개 사용자 디렉터리('users' 컬렉션) 조회를 담당하는 서비스 클래스.
    사용자 문서는 로그인 시 AuthService 가 기록하며, 여기서는 읽기만 합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    @staticmethod
    def to_author(user_data: Dict) -> Author:
        """사용자 문서를 공개 정보(Author)로 변환합니다."""
        return Author(
            id=user_data['user_id'],
            username=user_data['username'],
            profile_picture=user_data.get('profile_image_url')
        )

    def get_user_by_username(self, username: str) -> Optional[Author]:
        """사용자명으로 공개 프로필을 조회합니다. 없으면 None."""
        try:
            docs = self.users_ref.where('username', '==', username).limit(1).stream()
            user_doc = next(iter(docs), None)
            if user_doc is None:
                return None
            return self.to_author(user_doc.to_dict())
        except Exception as e:
            logging.error(f"사용자명으로 사용자 조회 실패 (username: {username}): {e}", exc_info=True)
            raise

    def get_authors_by_ids(self, user_ids: Iterable[str]) -> Dict[str, Author]:
        """여러 사용자 ID 의 공개 정보를 한 번에 조회합니다. 없는 ID 는 결과에서 빠집니다."""
        authors = {}
        for user_id in dict.fromkeys(user_ids):
            doc = self.users_ref.document(user_id).get()
            if doc.exists:
                authors[user_id] = self.to_author(doc.to_dict())
        return authors
