# chirp/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify, render_template, request
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from chirp.core.config import config_by_name

# - 블루프린트
from chirp.api.auth.routes import auth_bp
from chirp.api.router import rpc_bp
from chirp.views.routes import pages_bp

# - 서비스 모듈
from chirp.api.auth.services import AuthService
from chirp.api.posts.services import PostService
from chirp.api.profile.services import UserService

# - 프로시저 등록 (import 시 레지스트리에 등록됩니다)
from chirp.api.posts import procedures as _post_procedures  # noqa: F401
from chirp.api.profile import procedures as _profile_procedures  # noqa: F401


def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.
    db 를 넘기면 Firebase 초기화 없이 해당 Firestore 클라이언트(또는 호환 객체)를 사용합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}
    app.services['users'] = UserService(db=db)
    app.services['auth'] = AuthService(db=db)
    app.services['posts'] = PostService(
        user_service=app.services['users'],
        db=db,
        feed_limit=app.config['FEED_LIMIT'],
        rate_limit=app.config['POST_RATE_LIMIT'],
        rate_window_seconds=app.config['POST_RATE_WINDOW_SECONDS']
    )
    logging.info("Chirp services initialized successfully")

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(rpc_bp, url_prefix='/api/rpc')
    app.register_blueprint(pages_bp)

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(500)
    def handle_internal_error(err):
        # 다른 핸들러에서 처리되지 않은 예외는 여기서 로그를 남기고 공통 형식으로 응답합니다.
        original = getattr(err, 'original_exception', None) or err
        logging.error(f"An unhandled exception occurred: {original}", exc_info=original)
        # 화면 라우트는 HTML 오류 페이지, 그 외(API)는 JSON 으로 응답합니다.
        if request.blueprint == pages_bp.name:
            return render_template('error.html'), 500
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "Something went wrong."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
