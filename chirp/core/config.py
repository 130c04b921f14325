# chirp/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # Flask 세션(flash 메시지) 서명에 사용합니다.
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    # 세션 쿠키(JWT)를 서명하는 키. 토큰 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-jwt-secret-key')
    # 브라우저 페이지는 쿠키로, 스크립트/API 클라이언트는 Authorization 헤더로 세션을 전달합니다.
    JWT_TOKEN_LOCATION = ['cookies', 'headers']
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=12)
    JWT_COOKIE_SECURE = os.getenv('JWT_COOKIE_SECURE', '0') in {'1', 'true', 'True'}
    JWT_COOKIE_CSRF_PROTECT = True
    # 서버 렌더링 폼은 헤더 대신 숨김 필드(csrf_token)로 CSRF 토큰을 보냅니다.
    JWT_CSRF_CHECK_FORM = True

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    # 외부 인증 제공자가 호스팅하는 로그인 화면 주소. 기본값은 앱의 /sign-in 페이지입니다.
    SIGN_IN_URL = os.getenv('SIGN_IN_URL', '/sign-in')
    # /sign-in 페이지가 Firebase Authentication 웹 SDK 를 초기화할 때 사용하는 공개 설정값
    FIREBASE_WEB_API_KEY = os.getenv('FIREBASE_WEB_API_KEY')
    FIREBASE_AUTH_DOMAIN = os.getenv('FIREBASE_AUTH_DOMAIN')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 게시글 정책
    POST_MAX_LENGTH = _int_env('POST_MAX_LENGTH', 280)
    POST_RATE_LIMIT = _int_env('POST_RATE_LIMIT', 3)
    POST_RATE_WINDOW_SECONDS = _int_env('POST_RATE_WINDOW_SECONDS', 60)
    FEED_LIMIT = _int_env('FEED_LIMIT', 100)

    # 데이터 클라이언트 설정. QUERY_STALE_SECONDS 가 0 이면 무효화되기 전까지 캐시를 유지합니다.
    QUERY_STALE_SECONDS = _int_env('QUERY_STALE_SECONDS', 0)
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://127.0.0.1:5000')
    API_TIMEOUT_SECONDS = float(os.getenv('API_TIMEOUT_SECONDS', '10'))


class DevelopmentConfig(Config):
    """개발 환경 설정. 코드 변경 시 자동 재시작되고 상세한 에러 화면이 표시됩니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """테스트 환경 설정."""
    TESTING = True
    DEBUG = False
    # 테스트 클라이언트는 CSRF 토큰을 싣지 않습니다.
    JWT_COOKIE_CSRF_PROTECT = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False
    JWT_COOKIE_SECURE = True


# FLASK_ENV 값에 따라 create_app 에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
