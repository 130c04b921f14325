# chirp/api/auth/services.py
import logging
from dataclasses import asdict
from typing import Dict, Any, Tuple, Optional

from firebase_admin import firestore
from flask import g
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from chirp.models.user import User, Session
from chirp.services.identity_service import IdentityService
from chirp.utils.datetime_utils import DateTimeUtils


class AuthService:
    """
    로그인 시 공개 사용자 디렉터리(users 컬렉션)를 동기화합니다.
    사용자 식별 자체는 외부 인증 제공자가 소유합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def _unique_username(self, username: str, user_id: str) -> str:
        docs = self.users_ref.where('username', '==', username).limit(1).stream()
        taken_by = next(iter(docs), None)
        if taken_by is None or taken_by.id == user_id:
            return username
        return f"{username}_{user_id[:6].lower()}"

    def get_or_create_user(self, claims: Dict[str, Any]) -> Tuple[User, bool]:
        """
        인증 제공자의 클레임으로 사용자 문서를 조회하거나 생성합니다.
        기존 사용자는 이름/프로필 이미지를 최신 클레임으로 갱신합니다.
        """
        user_id = claims.get('uid')
        if not user_id:
            raise ValueError("Identity claims must contain 'uid'.")

        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if user_doc.exists:
            user_data = DateTimeUtils.from_firestore(user_doc.to_dict())
            updates = {
                'full_name': claims.get('name', user_data.get('full_name')),
                'profile_image_url': claims.get('picture', user_data.get('profile_image_url')),
            }
            user_ref.update(updates)
            user_data.update(updates)
            return User(**user_data), False

        new_user = User(
            user_id=user_id,
            username=self._unique_username(IdentityService.username_from_claims(claims), user_id),
            full_name=claims.get('name'),
            email=claims.get('email'),
            profile_image_url=claims.get('picture'),
            join_date=DateTimeUtils.now()
        )
        user_ref.set(DateTimeUtils.for_firestore(asdict(new_user)))
        logging.info(f"신규 사용자 등록 (user_id: {user_id}, username: {new_user.username})")
        return new_user, True


def load_session() -> Session:
    """
    현재 요청의 세션을 읽습니다. 요청당 한 번만 해석하며,
    토큰이 없거나 만료/위조된 경우 익명 세션을 반환합니다.
    """
    if 'chirp_session' in g:
        return g.chirp_session

    session = Session.anonymous()
    try:
        if verify_jwt_in_request(optional=True) is not None:
            claims = get_jwt()
            session = Session(
                id=claims['sub'],
                full_name=claims.get('full_name'),
                profile_image_url=claims.get('profile_image_url')
            )
    except (JWTExtendedException, PyJWTError) as e:
        logging.info(f"세션 토큰 무시됨: {e}")

    g.chirp_session = session
    return session


def csrf_token() -> Optional[str]:
    """서버 렌더링 폼에 넣을 CSRF 토큰. 로그인 상태가 아니면 None."""
    if not load_session().is_signed_in:
        return None
    return get_jwt().get('csrf')
