# chirp/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies
from marshmallow import ValidationError

from chirp.api.auth.schemas import SessionLoginSchema
from chirp.services.identity_service import IdentityService

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/session', methods=['POST'])
def create_session():
    """
    인증 제공자의 ID 토큰을 검증하고 세션 쿠키를 발급합니다.
    최초 로그인이면 공개 사용자 디렉터리에 등록합니다.
    """
    auth_service = current_app.services['auth']
    try:
        data = SessionLoginSchema().load(request.get_json(silent=True) or {})
        claims = IdentityService.verify_id_token(data['id_token'])
        if not claims:
            return jsonify({"error_code": "INVALID_ID_TOKEN", "message": "The ID token is invalid or expired."}), 401

        user, is_new_user = auth_service.get_or_create_user(claims)
        access_token = create_access_token(
            identity=user.user_id,
            additional_claims={
                "full_name": user.full_name,
                "profile_image_url": user.profile_image_url,
            }
        )
        response = jsonify({
            # 쿠키를 쓰지 않는 API 클라이언트는 Authorization 헤더로 같은 토큰을 보냅니다.
            "access_token": access_token,
            "is_new_user": is_new_user,
            "user_info": {
                "user_id": user.user_id,
                "username": user.username,
                "full_name": user.full_name,
                "profile_image_url": user.profile_image_url
            }
        })
        set_access_cookies(response, access_token)
        return response, 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"로그인 처리 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "Failed to sign in."}), 500


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """세션 쿠키를 제거합니다. 인증 제공자 측 세션은 제공자가 관리합니다."""
    response = jsonify({"message": "Signed out."})
    unset_jwt_cookies(response)
    return response, 200
