# chirp/client/errors.py
from typing import Optional, Dict, Any, List


class ApiError(Exception):
    """
    프로시저 호출 실패를 나타내는 클라이언트 측 예외.
    서버의 {"error_code", "message", "details"} 응답, 또는 네트워크 오류를 담습니다.
    """
    def __init__(self, error_code: str, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status = status
        self.details = details

    def field_errors(self, field: str) -> List[str]:
        """
        특정 필드의 검증 오류 메시지 목록을 반환합니다. 없으면 빈 리스트.
        details 가 필드별 메시지 리스트가 아닌 경우도 빈 리스트로 처리합니다.
        """
        if not isinstance(self.details, dict):
            return []
        messages = self.details.get(field)
        if isinstance(messages, str):
            return [messages]
        if isinstance(messages, list):
            return [m for m in messages if isinstance(m, str)]
        return []

    def __repr__(self):
        return f"ApiError({self.error_code!r}, {self.message!r}, status={self.status!r})"
