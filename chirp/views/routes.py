# chirp/views/routes.py
import logging
from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_jwt_extended import unset_jwt_cookies, verify_jwt_in_request
from flask_jwt_extended.exceptions import CSRFError, JWTExtendedException
from jwt import PyJWTError

from chirp.views.composer import PostComposer
from chirp.views.context import get_context
from chirp.views.profile import ProfilePage
from chirp.views.shell import PageShell, PostPage

pages_bp = Blueprint('pages_bp', __name__)


@pages_bp.route('/', methods=['GET'])
def index():
    return PageShell(get_context()).render()


@pages_bp.route('/sign-in', methods=['GET'])
def sign_in():
    """
    인증 제공자(Firebase Authentication)의 로그인 창을 띄우는 페이지.
    받은 ID 토큰은 /api/auth/session 으로 보내 세션 쿠키로 교환합니다.
    """
    if get_context().session.is_signed_in:
        return redirect(url_for('pages_bp.index'))
    config = current_app.config
    firebase_config = None
    if config.get('FIREBASE_WEB_API_KEY'):
        firebase_config = {
            "apiKey": config['FIREBASE_WEB_API_KEY'],
            "authDomain": config.get('FIREBASE_AUTH_DOMAIN'),
            "projectId": config.get('FIREBASE_PROJECT_ID'),
        }
    return render_template('sign_in.html', firebase_config=firebase_config), 200


@pages_bp.route('/compose', methods=['POST'])
def compose():
    """
    작성기 폼 제출.
    - 성공: 홈으로 리다이렉트 (무효화된 피드를 다시 조회)
    - 실패: 입력을 유지한 채 홈 화면을 다시 그리고 오류 토스트를 표시
    """
    ctx = get_context()
    if not ctx.session.is_signed_in:
        return redirect(url_for('pages_bp.index'))

    composer = PostComposer(ctx)
    composer.change(request.form.get('content', ''))
    # 버튼 클릭은 trigger=click 을 보내고, 입력창에서 Enter 로 제출하면 trigger 가 없습니다.
    if request.form.get('trigger') == 'click':
        submitted = composer.click()
    else:
        submitted = composer.key_down(PostComposer.SUBMIT_KEY)

    if composer.error:
        flash(composer.error, 'error')
        return PageShell(ctx, composer=composer).render(status=400)
    if submitted:
        logging.info(f"게시글 작성 완료 (user_id: {ctx.session.id})")
    return redirect(url_for('pages_bp.index'))


@pages_bp.route('/sign-out', methods=['POST'])
def sign_out():
    """세션 쿠키를 제거합니다. 쿠키 세션이면 폼의 CSRF 토큰이 맞아야 합니다."""
    response = redirect(url_for('pages_bp.index'))
    try:
        verify_jwt_in_request(optional=True)
    except CSRFError as e:
        logging.warning(f"로그아웃 요청 거부 (CSRF): {e}")
        return response
    except (JWTExtendedException, PyJWTError) as e:
        # 만료되었거나 손상된 토큰은 그대로 지웁니다.
        logging.info(f"로그아웃 시 세션 토큰 무시됨: {e}")
    unset_jwt_cookies(response)
    return response


@pages_bp.route('/post/<string:post_id>', methods=['GET'])
def post_detail(post_id: str):
    ctx = get_context()
    return PostPage(ctx.client.posts.get_by_id.query({'post_id': post_id})).render()


@pages_bp.route('/<string:slug>', methods=['GET'])
def profile(slug: str):
    # 프로필 주소는 /@{username} 형태만 허용합니다.
    if not slug.startswith('@'):
        return render_template('not_found.html'), 404
    return ProfilePage.load(get_context().client, slug).render()
