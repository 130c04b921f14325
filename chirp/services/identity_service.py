# chirp/services/identity_service.py

import logging
import re
from typing import Optional, Dict, Any

from firebase_admin import auth as firebase_auth

_USERNAME_INVALID_CHARS = re.compile(r'[^a-z0-9_.]')


class IdentityService:
    """
    외부 인증 제공자(Firebase Authentication)와의 통신을 담당하는 서비스 클래스입니다.
    로그인 화면과 토큰 발급은 제공자가 담당하고, 여기서는 ID 토큰 검증만 수행합니다.
    """

    @staticmethod
    def verify_id_token(id_token: str) -> Optional[Dict[str, Any]]:
        """
        ID 토큰을 검증하고 사용자 클레임을 반환합니다.
        유효하지 않거나 만료된 토큰이면 None 을 반환합니다.
        """
        try:
            return firebase_auth.verify_id_token(id_token)
        except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError) as e:
            logging.warning(f"ID 토큰 검증 실패: {e}")
            return None

    @staticmethod
    def username_from_claims(claims: Dict[str, Any]) -> str:
        """
        사용자명은 제공자의 'username' 커스텀 클레임을 우선 사용하고,
        없으면 이메일의 로컬 파트, 그것도 없으면 uid 를 사용합니다.
        """
        raw = claims.get('username')
        if not raw and claims.get('email'):
            raw = claims['email'].split('@', 1)[0]
        if not raw:
            raw = claims['uid']
        username = _USERNAME_INVALID_CHARS.sub('', raw.lower())
        return username or claims['uid'].lower()
