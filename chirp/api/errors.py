# chirp/api/errors.py
from typing import Optional, Dict, Any


class ApiException(Exception):
    """
    프로시저에서 발생시키는 예외의 기반 클래스.
    RPC 블루프린트의 에러 핸들러가 {"error_code", "message", "details"} 형식으로 직렬화합니다.
    """
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"error_code": self.error_code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequest(ApiException):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid input."


class Unauthorized(ApiException):
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "You must be signed in."


class NotFound(ApiException):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found."


class ProcedureNotFound(ApiException):
    status_code = 404
    error_code = "PROCEDURE_NOT_FOUND"
    default_message = "No such procedure."


class TooManyRequests(ApiException):
    status_code = 429
    error_code = "TOO_MANY_REQUESTS"
    default_message = "Too many posts. Please wait a moment."


class InternalServerError(ApiException):
    pass


class MethodNotSupported(ApiException):
    status_code = 405
    error_code = "METHOD_NOT_SUPPORTED"
    default_message = "Queries use GET and mutations use POST."
