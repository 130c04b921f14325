# chirp/client/__init__.py
"""
타입이 있는 원격 프로시저 클라이언트.

- ChirpClient: posts/profile 프로시저를 query/mutation 으로 감싼 진입점
- QueryClient: 쿼리 키별 결과 캐시, 무효화(invalidate) 신호, 구독
- 전송 계층: HttpTransport(requests) / LocalTransport(프로세스 내부 호출)
"""

from .api import ChirpClient
from .errors import ApiError
from .query import QueryClient, QueryResult, Mutation
from .transport import HttpTransport, LocalTransport

__all__ = [
    'ChirpClient', 'ApiError',
    'QueryClient', 'QueryResult', 'Mutation',
    'HttpTransport', 'LocalTransport'
]
