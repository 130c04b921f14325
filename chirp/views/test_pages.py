# chirp/views/test_pages.py
from datetime import datetime, timedelta, timezone

from chirp.client import QueryResult
from chirp.models.user import Author
from chirp.views.profile import ProfilePage
from chirp.views.shell import PageShell, PostPage


def _seed_feed(db):
    now = datetime.now(timezone.utc)
    db.add_user('u1', 'ada', profile_image_url='https://img.example.com/ada.png')
    db.add_user('u2', 'grace')
    db.add_post('p1', 'u1', '🐣', created_at=now - timedelta(hours=2))
    db.add_post('p2', 'u2', '🚀', created_at=now - timedelta(minutes=3))


# --- 홈 화면 ---

def test_home_signed_out_shows_sign_in_and_feed(client, db):
    _seed_feed(db)

    response = client.get('/')
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert 'Sign in' in html
    assert 'href="/sign-in"' in html
    assert 'class="composer"' not in html
    assert 'Sign out' not in html
    assert html.index('post-p2') < html.index('post-p1')
    assert '3 minutes ago' in html
    assert '2 hours ago' in html


def test_home_signed_in_shows_greeting_and_composer(client, sign_in):
    sign_in(name='Ada Lovelace')

    html = client.get('/').get_data(as_text=True)

    assert 'Hi Ada Lovelace' in html
    assert 'Sign out' in html
    assert 'Type some emojis :)' in html
    assert 'class="sign-in-button"' not in html


def test_home_feed_failure_message(client, db):
    db.add_post('p1', 'ghost', '👻')

    response = client.get('/')

    assert response.status_code == 200
    assert 'Something went wrong...' in response.get_data(as_text=True)


# --- 작성기 ---

def test_compose_click_creates_post_and_redirects(client, db, sign_in):
    sign_in(uid='user-1')

    response = client.post('/compose', data={'content': '🐦', 'trigger': 'click'})

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/')
    posts = list(db.collections['posts'].values())
    assert [(p['author_id'], p['content']) for p in posts] == [('user-1', '🐦')]

    html = client.get('/').get_data(as_text=True)
    assert '🐦' in html
    assert 'a few seconds ago' in html


def test_compose_enter_key_submits(client, db, sign_in):
    sign_in(uid='user-1')

    response = client.post('/compose', data={'content': '⌨️'})

    assert response.status_code == 302
    assert len(db.collections['posts']) == 1


def test_compose_empty_input_is_ignored(client, db, sign_in):
    sign_in()

    response = client.post('/compose', data={'content': ''})

    assert response.status_code == 302
    assert db.collections.get('posts', {}) == {}


def test_compose_validation_error_keeps_input_and_shows_toast(client, db, sign_in):
    sign_in()
    content = 'a' * 281

    response = client.post('/compose', data={'content': content, 'trigger': 'click'})
    html = response.get_data(as_text=True)

    assert response.status_code == 400
    assert 'toast-error' in html
    assert 'Post content must be at most 280 characters.' in html
    assert f'value="{content}"' in html
    assert db.collections.get('posts', {}) == {}


def test_compose_rate_limit_shows_generic_toast(client, sign_in):
    sign_in()
    for _ in range(3):
        client.post('/compose', data={'content': '🙂'})

    response = client.post('/compose', data={'content': '🙂'})

    assert response.status_code == 400
    assert 'Failed to post! Please try again later.' in response.get_data(as_text=True)


def test_compose_requires_sign_in(client, db):
    response = client.post('/compose', data={'content': '🙂'})

    assert response.status_code == 302
    assert db.collections.get('posts', {}) == {}


def test_sign_out(client, sign_in):
    sign_in()

    response = client.post('/sign-out')

    assert response.status_code == 302
    assert 'Sign in' in client.get('/').get_data(as_text=True)


# --- 프로필 / 게시글 ---

def test_profile_page(client, db):
    db.add_user('u1', 'ada', profile_image_url='https://img.example.com/ada.png')

    response = client.get('/@ada')
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '<title>Profile</title>' in html
    assert '<div class="username">ada</div>' in html
    assert 'https://img.example.com/ada.png' in html


def test_profile_page_unknown_user_is_404(client, db):
    db.add_user('u1', 'ada')

    response = client.get('/@nobody')

    assert response.status_code == 404
    assert '404' in response.get_data(as_text=True)


def test_post_permalink(client, db):
    _seed_feed(db)

    response = client.get('/post/p1')
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '🐣' in html
    assert 'href="/@ada"' in html


def test_post_permalink_missing_is_404(client):
    assert client.get('/post/nope').status_code == 404


def test_author_link_from_feed_resolves(client, db):
    _seed_feed(db)

    response = client.get('/@grace')

    assert response.status_code == 200


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'ok'}


# --- 로그인 페이지 ---

def test_sign_in_link_leads_to_sign_in_page(app, client):
    home = client.get('/').get_data(as_text=True)
    assert f'href="{app.config["SIGN_IN_URL"]}"' in home

    response = client.get(app.config['SIGN_IN_URL'])

    assert response.status_code == 200
    assert 'Sign-in is not configured.' in response.get_data(as_text=True)


def test_sign_in_page_starts_provider_sign_in(app, client):
    app.config['FIREBASE_WEB_API_KEY'] = 'web-key-123'
    app.config['FIREBASE_AUTH_DOMAIN'] = 'chirp.firebaseapp.com'

    html = client.get('/sign-in').get_data(as_text=True)

    assert 'firebase.initializeApp' in html
    assert '"web-key-123"' in html
    assert '"chirp.firebaseapp.com"' in html
    assert '"/api/auth/session"' in html
    assert 'Sign in with Google' in html


def test_sign_in_page_redirects_when_signed_in(client, sign_in):
    sign_in()

    response = client.get('/sign-in')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/')


def test_profile_route_requires_at_prefix(client, db):
    db.add_user('u1', 'ada')

    assert client.get('/ada').status_code == 404
    assert client.get('/@ada').status_code == 200


# --- 로그아웃 CSRF ---

def test_sign_out_requires_csrf_token(app, client, sign_in):
    app.config['JWT_COOKIE_CSRF_PROTECT'] = True
    sign_in(name='Ada Lovelace')
    csrf = client.get_cookie('csrf_access_token').value
    assert f'name="csrf_token" value="{csrf}"' in client.get('/').get_data(as_text=True)

    rejected = client.post('/sign-out')

    assert rejected.status_code == 302
    assert client.get_cookie('access_token_cookie') is not None
    assert 'Hi Ada Lovelace' in client.get('/').get_data(as_text=True)

    accepted = client.post('/sign-out', data={'csrf_token': csrf})

    assert accepted.status_code == 302
    assert client.get_cookie('access_token_cookie') is None
    assert 'Sign in' in client.get('/').get_data(as_text=True)


# --- 처리되지 않은 예외 ---

def test_page_crash_renders_html_error_page(app, client, monkeypatch):
    app.config['PROPAGATE_EXCEPTIONS'] = False

    def explode(self, status=200):
        raise RuntimeError("template exploded")

    monkeypatch.setattr(PageShell, 'render', explode)

    response = client.get('/')

    assert response.status_code == 500
    assert response.mimetype == 'text/html'
    assert 'Something went wrong...' in response.get_data(as_text=True)


def test_api_crash_returns_json_error(app, client):
    app.config['PROPAGATE_EXCEPTIONS'] = False

    @app.route('/api/explode')
    def explode():
        raise RuntimeError("boom")

    response = client.get('/api/explode')

    assert response.status_code == 500
    assert response.get_json() == {"error_code": "INTERNAL_SERVER_ERROR", "message": "Something went wrong."}


# --- 로딩 상태 ---

def test_profile_and_post_pages_render_loading_state(app):
    with app.test_request_context():
        profile_html, profile_status = ProfilePage('ada', QueryResult(status='loading')).render()
        post_html, post_status = PostPage(QueryResult(status='loading')).render()

    assert profile_status == 200
    assert 'Loading...' in profile_html
    assert post_status == 200
    assert 'Loading...' in post_html


def test_profile_page_states(app):
    ada = Author(id='u1', username='ada')

    assert ProfilePage('ada', QueryResult(status='loading')).state == 'loading'
    assert ProfilePage('ada', QueryResult(status='success', data=None)).state == 'not_found'
    assert ProfilePage('ada', QueryResult(status='success', data=ada)).state == 'data'
