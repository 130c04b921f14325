# chirp/views/context.py
from dataclasses import dataclass
from typing import Optional

from flask import current_app, g

from chirp.api.auth.services import load_session, csrf_token
from chirp.client import ChirpClient
from chirp.models.user import Session


@dataclass
class ChirpContext:
    """
    화면 컴포넌트에 주입되는 컨텍스트.
    요청이 시작될 때 한 번 만들어지며, 세션과 (요청 단위 캐시를 가진) 데이터 클라이언트를 담습니다.
    """
    session: Session
    client: ChirpClient
    csrf_token: Optional[str] = None


def get_context() -> ChirpContext:
    if 'chirp_context' not in g:
        session = load_session()
        stale_time = current_app.config.get('QUERY_STALE_SECONDS') or None
        g.chirp_context = ChirpContext(
            session=session,
            client=ChirpClient.in_process(current_app.services, session, stale_time=stale_time),
            csrf_token=csrf_token()
        )
    return g.chirp_context
