# chirp/client/transport.py
import json
import logging
from typing import Any, Dict, Optional

import requests

from chirp.api.errors import ApiException
from chirp.api.router import ProcedureContext, call_procedure, QUERY
from chirp.client.errors import ApiError
from chirp.models.user import Session


class HttpTransport:
    """
    HTTP(JSON) 로 /api/rpc/<name> 을 호출하는 전송 계층.
    - query: GET ?input=<json>
    - mutation: POST JSON 본문
    """
    def __init__(self, base_url: str, access_token: Optional[str] = None, timeout: float = 10.0,
                 http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = http or requests.Session()
        if access_token:
            self.http.headers['Authorization'] = f"Bearer {access_token}"

    def call(self, name: str, kind: str, payload: Any = None) -> Any:
        url = f"{self.base_url}/api/rpc/{name}"
        try:
            if kind == QUERY:
                params = {'input': json.dumps(payload)} if payload is not None else None
                response = self.http.get(url, params=params, timeout=self.timeout)
            else:
                response = self.http.post(url, json=payload or {}, timeout=self.timeout)
        except requests.RequestException as e:
            logging.warning(f"프로시저 호출 실패 ({name}): {e}")
            raise ApiError('NETWORK_ERROR', str(e))

        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            raise ApiError(
                body.get('error_code', 'HTTP_ERROR'),
                body.get('message') or body.get('msg') or response.reason or 'Request failed',
                status=response.status_code,
                details=body.get('details')
            )
        return body.get('result')


class LocalTransport:
    """
    같은 프로세스 안의 프로시저를 직접 호출하는 전송 계층.
    서버 렌더링 페이지가 자기 자신에게 HTTP 요청을 보내지 않도록 사용합니다.
    결과와 오류는 HttpTransport 와 같은 형태입니다.
    """
    def __init__(self, services: Dict[str, Any], session: Session):
        self.services = services
        self.session = session

    def call(self, name: str, kind: str, payload: Any = None) -> Any:
        ctx = ProcedureContext(services=self.services, session=self.session)
        try:
            return call_procedure(name, ctx, payload, kind=kind)
        except ApiException as e:
            raise ApiError(e.error_code, e.message, status=e.status_code, details=e.details)
