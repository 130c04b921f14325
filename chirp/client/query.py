# chirp/client/query.py
"""
쿼리 결과 캐시와 무효화 모델.

- 캐시는 쿼리 키(예: ("posts.getAll",))별로 결과를 하나씩 보관하며, 같은 키의 조회는 캐시를 재사용합니다.
- invalidate(key) 는 해당 키(및 그 키로 시작하는 키)를 stale 로 표시하고 구독자에게 알립니다.
  활성 관찰자(QueryObserver)가 있는 항목은 즉시 다시 가져오고, 나머지는 다음 조회 때 다시 가져옵니다.
- 뮤테이션은 결과를 예측해 캐시에 미리 넣지 않습니다. 성공 후 무효화 -> 재조회만 합니다.

단일 스레드(요청 단위) 사용을 전제로 하며 잠금은 하지 않습니다.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from chirp.client.errors import ApiError

QueryKey = Tuple[Any, ...]

LOADING = 'loading'
SUCCESS = 'success'
ERROR = 'error'


@dataclass
class QueryResult:
    status: str
    data: Any = None
    error: Optional[ApiError] = None
    is_stale: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == ERROR


class _QueryEntry:
    def __init__(self, key: QueryKey, fetcher: Callable[[], Any]):
        self.key = key
        self.fetcher = fetcher
        self.status = LOADING
        self.data = None
        self.error: Optional[ApiError] = None
        self.updated_at: Optional[float] = None
        self.invalidated = False
        self.observers = 0
        self.fetch_count = 0


def key_matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix


class QueryClient:
    """
    쿼리 캐시. stale_time(초)이 None 이면 무효화되기 전까지 결과를 재사용합니다.
    """
    def __init__(self, stale_time: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.stale_time = stale_time
        self._clock = clock
        self._entries: Dict[QueryKey, _QueryEntry] = {}
        self._listeners: List[Tuple[QueryKey, Callable[[QueryKey], None]]] = []

    # --- 조회 ---

    def _is_stale(self, entry: _QueryEntry) -> bool:
        if entry.invalidated or entry.updated_at is None:
            return True
        if self.stale_time is None:
            return False
        return self._clock() - entry.updated_at >= self.stale_time

    def _entry(self, key: QueryKey, fetcher: Callable[[], Any]) -> _QueryEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _QueryEntry(key, fetcher)
        else:
            entry.fetcher = fetcher
        return entry

    def _run(self, entry: _QueryEntry) -> None:
        entry.fetch_count += 1
        try:
            data = entry.fetcher()
        except ApiError as e:
            logging.warning(f"쿼리 실패 ({entry.key[0]}): {e.error_code} {e.message}")
            # 이전에 성공한 데이터는 유지합니다.
            entry.status = ERROR
            entry.error = e
        else:
            entry.status = SUCCESS
            entry.data = data
            entry.error = None
        entry.updated_at = self._clock()
        entry.invalidated = False

    def _result(self, entry: _QueryEntry) -> QueryResult:
        return QueryResult(status=entry.status, data=entry.data, error=entry.error,
                           is_stale=self._is_stale(entry))

    def query(self, key: QueryKey, fetcher: Callable[[], Any]) -> QueryResult:
        """캐시가 신선하면 그대로, 아니면 다시 가져와서 결과 상태를 반환합니다. 예외를 던지지 않습니다."""
        entry = self._entry(key, fetcher)
        if self._is_stale(entry):
            self._run(entry)
        return self._result(entry)

    def fetch_query(self, key: QueryKey, fetcher: Callable[[], Any]) -> Any:
        """query() 와 같지만 실패 시 ApiError 를 던지고 데이터만 반환합니다."""
        result = self.query(key, fetcher)
        if result.is_error:
            raise result.error
        return result.data

    def peek(self, key: QueryKey) -> QueryResult:
        """가져오기를 시작하지 않고 현재 상태만 반환합니다. 처음 보는 키는 loading 입니다."""
        entry = self._entries.get(key)
        if entry is None:
            return QueryResult(status=LOADING)
        return self._result(entry)

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def fetch_count(self, key: QueryKey) -> int:
        entry = self._entries.get(key)
        return entry.fetch_count if entry is not None else 0

    # --- 무효화 / 구독 ---

    def subscribe(self, key: QueryKey, callback: Callable[[QueryKey], None]) -> Callable[[], None]:
        """
        key(접두사)에 대한 무효화 신호를 구독합니다. 반환값을 호출하면 구독이 해제됩니다.
        """
        listener = (key, callback)
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def invalidate(self, key: QueryKey) -> List[QueryKey]:
        """
        key 로 시작하는 모든 쿼리를 stale 로 표시합니다.
        활성 관찰자가 있는 쿼리는 즉시 다시 가져옵니다. 표시된 키 목록을 반환합니다.
        """
        marked = [k for k in self._entries if key_matches(k, key)]
        for k in marked:
            entry = self._entries[k]
            entry.invalidated = True
            if entry.observers > 0:
                self._run(entry)
        logging.debug(f"쿼리 무효화: {key} -> {len(marked)}건")

        for prefix, callback in list(self._listeners):
            for k in marked:
                if key_matches(k, prefix):
                    callback(k)
        return marked

    def watch(self, key: QueryKey, fetcher: Callable[[], Any]) -> "QueryObserver":
        return QueryObserver(self, key, fetcher)


class QueryObserver:
    """
    쿼리를 '활성' 상태로 붙잡아 두는 관찰자.
    관찰 중인 키가 무효화되면 QueryClient 가 즉시 다시 가져오고, result 는 항상 최신 상태를 반영합니다.
    """
    def __init__(self, client: QueryClient, key: QueryKey, fetcher: Callable[[], Any]):
        self.client = client
        self.key = key
        self._entry = client._entry(key, fetcher)
        self._entry.observers += 1
        self._closed = False
        client.query(key, fetcher)

    @property
    def result(self) -> QueryResult:
        return self.client.peek(self.key)

    def close(self) -> None:
        if not self._closed:
            self._entry.observers -= 1
            self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class Mutation:
    """
    원격 쓰기 작업 래퍼. 호출 중에는 is_loading 이 True 입니다.
    실패는 예외로 던지지 않고 on_error 로 전달합니다.
    """
    def __init__(self, fn: Callable[[Any], Any],
                 on_success: Optional[Callable[[Any], None]] = None,
                 on_error: Optional[Callable[[ApiError], None]] = None):
        self._fn = fn
        self._on_success = on_success
        self._on_error = on_error
        self.is_loading = False
        self.data = None
        self.error: Optional[ApiError] = None

    def mutate(self, variables: Any) -> bool:
        """뮤테이션을 실행합니다. 성공 여부를 반환합니다."""
        self.is_loading = True
        try:
            self.data = self._fn(variables)
            self.error = None
        except ApiError as e:
            self.error = e
            self.is_loading = False
            if self._on_error:
                self._on_error(e)
            return False
        self.is_loading = False
        if self._on_success:
            self._on_success(self.data)
        return True
