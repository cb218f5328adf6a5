# bhreads/core/exceptions.py
"""
서비스 계층에서 발생시키고 앱 전역 에러 핸들러가 JSON 응답으로 변환하는 예외 모음.
"""


class BhreadsError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "서버 내부에서 예상치 못한 오류가 발생했습니다."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error_code": self.error_code, "message": self.message}


class InvalidInputError(BhreadsError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "입력값 유효성 검사에 실패했습니다."


class ConflictError(BhreadsError):
    status_code = 400
    error_code = "CONFLICT"
    default_message = "이미 존재하는 리소스입니다."


class AlreadyRepostedError(ConflictError):
    error_code = "ALREADY_REPOSTED"
    default_message = "이미 리포스트한 게시물입니다."


class UnauthorizedError(BhreadsError):
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "인증이 필요합니다."


class MissingTokenError(UnauthorizedError):
    error_code = "MISSING_TOKEN"
    default_message = "Authorization 헤더가 없거나 형식이 올바르지 않습니다."


class InvalidTokenError(UnauthorizedError):
    error_code = "INVALID_TOKEN"
    default_message = "유효하지 않은 토큰입니다."


class ExpiredTokenError(UnauthorizedError):
    error_code = "TOKEN_EXPIRED"
    default_message = "토큰이 만료되었습니다. 다시 로그인해 주세요."


class InvalidCredentialsError(UnauthorizedError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "이메일 또는 비밀번호가 올바르지 않습니다."


class ForbiddenError(BhreadsError):
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "이 작업을 수행할 권한이 없습니다."


class NotFoundError(BhreadsError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "리소스를 찾을 수 없습니다."
