# conftest.py
"""
공용 pytest 픽스처.

FakeFirestore 는 서비스가 사용하는 Firestore 클라이언트 API 의 일부
(collection/document/get/set/update, where/order_by/limit/stream, count)만 메모리로 흉내냅니다.
"""
import copy
from datetime import datetime, timedelta, timezone

import pytest

from chirp import create_app
from chirp.services.identity_service import IdentityService

_OPERATORS = {
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    '<': lambda a, b: a is not None and a < b,
    '<=': lambda a, b: a is not None and a <= b,
    '>': lambda a, b: a is not None and a > b,
    '>=': lambda a, b: a is not None and a >= b,
    'in': lambda a, b: a in b,
}


def _field(data, path):
    for part in path.split('.'):
        if not isinstance(data, dict):
            return None
        data = data.get(part)
    return data


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    def set(self, data):
        self._store[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._store:
            raise KeyError(self.id)
        self._store[self.id].update(copy.deepcopy(data))


class FakeAggregate:
    def __init__(self, value):
        self.value = value


class FakeCountQuery:
    def __init__(self, query):
        self._query = query

    def get(self):
        return [[FakeAggregate(len(list(self._query.stream())))]]


class FakeQuery:
    def __init__(self, store, filters=(), order=None, limit=None):
        self._store = store
        self._filters = filters
        self._order = order
        self._limit = limit

    def where(self, field, op, value):
        return FakeQuery(self._store, self._filters + ((field, op, value),), self._order, self._limit)

    def order_by(self, field, direction='ASCENDING'):
        return FakeQuery(self._store, self._filters, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._filters, self._order, count)

    def stream(self):
        rows = [
            (doc_id, data) for doc_id, data in self._store.items()
            if all(_OPERATORS[op](_field(data, f), v) for f, op, v in self._filters)
        ]
        if self._order:
            field, direction = self._order
            rows.sort(key=lambda row: _field(row[1], field), reverse=direction == 'DESCENDING')
        if self._limit is not None:
            rows = rows[:self._limit]
        return iter([FakeSnapshot(doc_id, copy.deepcopy(data)) for doc_id, data in rows])

    def get(self):
        return list(self.stream())

    def count(self):
        return FakeCountQuery(self)


class FakeCollection(FakeQuery):
    def __init__(self, store):
        super().__init__(store)

    def document(self, doc_id):
        return FakeDocument(self._store, doc_id)


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))

    # --- 테스트 데이터 헬퍼 ---

    def add_user(self, user_id, username, full_name=None, profile_image_url=None):
        self.collection('users').document(user_id).set({
            'user_id': user_id,
            'username': username,
            'full_name': full_name,
            'email': f"{username}@example.com",
            'profile_image_url': profile_image_url,
            'join_date': datetime(2024, 1, 1, tzinfo=timezone.utc),
        })

    def add_post(self, post_id, author_id, content, created_at=None):
        self.collection('posts').document(post_id).set({
            'post_id': post_id,
            'author_id': author_id,
            'content': content,
            'created_at': created_at or datetime.now(timezone.utc) - timedelta(hours=1),
        })


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def app(db):
    app = create_app('testing', db=db)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sign_in(client, monkeypatch):
    """
    인증 제공자의 ID 토큰 검증을 대체하고 /api/auth/session 으로 로그인합니다.
    반환값은 세션 발급 응답(JSON)입니다.
    """
    def _sign_in(uid='user-1', name='Ada Lovelace', email='ada@example.com', picture='https://img.example.com/ada.png'):
        claims = {'uid': uid, 'name': name, 'email': email, 'picture': picture}
        monkeypatch.setattr(IdentityService, 'verify_id_token', staticmethod(lambda token: claims))
        response = client.post('/api/auth/session', json={'id_token': 'provider-token'})
        assert response.status_code == 200
        return response.get_json()
    return _sign_in
