# chirp/client/api.py
import json
from typing import Any, Callable, Dict, Optional

from marshmallow import Schema

from chirp.api.posts.schemas import PostSchema, PostWithAuthorSchema
from chirp.api.profile.schemas import AuthorSchema
from chirp.api.router import QUERY, MUTATION
from chirp.client.query import Mutation, QueryClient, QueryKey, QueryObserver, QueryResult
from chirp.client.transport import HttpTransport, LocalTransport
from chirp.models.user import Session


class QueryProcedure:
    """읽기 전용 프로시저. 결과는 응답 스키마로 읽어 데이터클래스로 변환됩니다."""
    def __init__(self, client: "ChirpClient", name: str, schema: Schema):
        self._client = client
        self.name = name
        self._schema = schema

    def key(self, input: Optional[Dict[str, Any]] = None) -> QueryKey:
        if input is None:
            return (self.name,)
        return (self.name, json.dumps(input, sort_keys=True))

    def _fetcher(self, input: Optional[Dict[str, Any]]) -> Callable[[], Any]:
        def fetch():
            raw = self._client.transport.call(self.name, QUERY, input)
            return None if raw is None else self._schema.load(raw)
        return fetch

    def query(self, input: Optional[Dict[str, Any]] = None) -> QueryResult:
        return self._client.queries.query(self.key(input), self._fetcher(input))

    def fetch(self, input: Optional[Dict[str, Any]] = None) -> Any:
        return self._client.queries.fetch_query(self.key(input), self._fetcher(input))

    def peek(self, input: Optional[Dict[str, Any]] = None) -> QueryResult:
        return self._client.queries.peek(self.key(input))

    def watch(self, input: Optional[Dict[str, Any]] = None) -> QueryObserver:
        return self._client.queries.watch(self.key(input), self._fetcher(input))

    def invalidate(self, input: Optional[Dict[str, Any]] = None):
        """input 을 생략하면 이 프로시저의 모든 쿼리를 무효화합니다."""
        return self._client.queries.invalidate(self.key(input))


class MutationProcedure:
    def __init__(self, client: "ChirpClient", name: str, schema: Schema):
        self._client = client
        self.name = name
        self._schema = schema

    def call(self, input: Dict[str, Any]) -> Any:
        raw = self._client.transport.call(self.name, MUTATION, input)
        return None if raw is None else self._schema.load(raw)

    def mutation(self, on_success=None, on_error=None) -> Mutation:
        return Mutation(self.call, on_success=on_success, on_error=on_error)


class _PostsProcedures:
    def __init__(self, client: "ChirpClient"):
        self.get_all = QueryProcedure(client, 'posts.getAll', PostWithAuthorSchema(many=True))
        self.get_by_id = QueryProcedure(client, 'posts.getById', PostWithAuthorSchema())
        self.create = MutationProcedure(client, 'posts.create', PostSchema())


class _ProfileProcedures:
    def __init__(self, client: "ChirpClient"):
        self.get_user_by_username = QueryProcedure(client, 'profile.getUserByUsername', AuthorSchema())


class ChirpClient:
    """
    posts / profile 프로시저에 대한 타입 있는 클라이언트.

        client = ChirpClient.over_http("http://127.0.0.1:5000", access_token=token)
        feed = client.posts.get_all.fetch()
        client.posts.create.mutation(on_success=lambda _: client.posts.get_all.invalidate()).mutate({"content": "hi"})
    """
    def __init__(self, transport, queries: Optional[QueryClient] = None):
        self.transport = transport
        self.queries = queries or QueryClient()
        self.posts = _PostsProcedures(self)
        self.profile = _ProfileProcedures(self)

    @classmethod
    def over_http(cls, base_url: str, access_token: Optional[str] = None, timeout: float = 10.0,
                  stale_time: Optional[float] = None) -> "ChirpClient":
        return cls(HttpTransport(base_url, access_token=access_token, timeout=timeout),
                   QueryClient(stale_time=stale_time))

    @classmethod
    def from_config(cls, config, access_token: Optional[str] = None) -> "ChirpClient":
        """앱 설정(API_BASE_URL, API_TIMEOUT_SECONDS, QUERY_STALE_SECONDS)으로 HTTP 클라이언트를 만듭니다."""
        return cls.over_http(
            config['API_BASE_URL'],
            access_token=access_token,
            timeout=config['API_TIMEOUT_SECONDS'],
            stale_time=config.get('QUERY_STALE_SECONDS') or None
        )

    @classmethod
    def in_process(cls, services: Dict[str, Any], session: Session,
                   stale_time: Optional[float] = None) -> "ChirpClient":
        return cls(LocalTransport(services, session), QueryClient(stale_time=stale_time))
