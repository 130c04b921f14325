# chirp/api/router.py
"""
원격 프로시저 레지스트리와 HTTP 노출용 블루프린트.

각 도메인 모듈(posts/procedures.py, profile/procedures.py)이 @procedure 데코레이터로
프로시저를 등록하고, 같은 레지스트리를 두 경로로 호출합니다.
- HTTP: GET /api/rpc/<name>?input=<json> (query), POST /api/rpc/<name> (mutation)
- 프로세스 내부: call_procedure() (서버 렌더링 페이지의 데이터 클라이언트가 사용)
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from marshmallow import Schema, ValidationError

from chirp.api.errors import (
    ApiException, BadRequest, InternalServerError, MethodNotSupported, ProcedureNotFound, Unauthorized
)
from chirp.models.user import Session

QUERY = 'query'
MUTATION = 'mutation'


@dataclass
class ProcedureContext:
    """프로시저 실행 시 주입되는 컨텍스트. 서비스 인스턴스와 현재 세션을 담습니다."""
    services: Dict[str, Any]
    session: Session


@dataclass
class Procedure:
    name: str
    kind: str
    handler: Callable[[ProcedureContext, Any], Any]
    input_schema: Optional[Schema] = None
    output_schema: Optional[Schema] = None
    protected: bool = False


_registry: Dict[str, Procedure] = {}


def procedure(name: str, kind: str = QUERY, input_schema: Optional[Schema] = None,
              output_schema: Optional[Schema] = None, protected: bool = False):
    """프로시저를 레지스트리에 등록하는 데코레이터."""
    def decorator(fn):
        _registry[name] = Procedure(
            name=name, kind=kind, handler=fn,
            input_schema=input_schema, output_schema=output_schema, protected=protected
        )
        return fn
    return decorator


def get_procedure(name: str) -> Procedure:
    proc = _registry.get(name)
    if proc is None:
        raise ProcedureNotFound(f"No procedure named '{name}'.")
    return proc


def call_procedure(name: str, ctx: ProcedureContext, raw_input: Any = None, kind: Optional[str] = None) -> Any:
    """
    프로시저를 호출하고 직렬화된(JSON 호환) 결과를 반환합니다.
    - 입력은 input_schema 로 검증하며, 실패 시 필드별 메시지를 details 에 담아 BadRequest 를 발생시킵니다.
    - 예상하지 못한 예외는 로그를 남기고 InternalServerError 로 변환합니다.
    """
    proc = get_procedure(name)
    if kind is not None and proc.kind != kind:
        raise MethodNotSupported(f"'{name}' is a {proc.kind}.")
    if proc.protected and not ctx.session.is_signed_in:
        raise Unauthorized()

    try:
        data = proc.input_schema.load(raw_input or {}) if proc.input_schema is not None else None
    except ValidationError as err:
        raise BadRequest(details=err.messages)

    try:
        result = proc.handler(ctx, data)
    except ApiException:
        raise
    except Exception as e:
        logging.error(f"프로시저 실행 중 오류 발생 ({name}): {e}", exc_info=True)
        raise InternalServerError()

    if result is None or proc.output_schema is None:
        return result
    return proc.output_schema.dump(result)


# =====================================================================================
# HTTP 노출
# =====================================================================================
rpc_bp = Blueprint('rpc_bp', __name__)


def _context() -> ProcedureContext:
    from chirp.api.auth.services import load_session
    return ProcedureContext(services=current_app.services, session=load_session())


@rpc_bp.route('/<string:name>', methods=['GET'])
def run_query(name: str):
    raw = request.args.get('input')
    try:
        raw_input = json.loads(raw) if raw else None
    except ValueError:
        raise BadRequest("'input' must be valid JSON.")
    result = call_procedure(name, _context(), raw_input, kind=QUERY)
    return jsonify({"result": result}), 200


@rpc_bp.route('/<string:name>', methods=['POST'])
def run_mutation(name: str):
    raw_input = request.get_json(silent=True)
    result = call_procedure(name, _context(), raw_input, kind=MUTATION)
    return jsonify({"result": result}), 200


@rpc_bp.errorhandler(ApiException)
def handle_api_exception(err: ApiException):
    return jsonify(err.to_dict()), err.status_code
