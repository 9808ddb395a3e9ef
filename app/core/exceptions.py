# app/core/exceptions.py

from typing import Any, List, Optional


class AppError(Exception):
    """서비스 계층 공통 예외

    code 는 클라이언트가 분기할 수 있는 고정 문자열이고, message 는 사용자에게
    그대로 노출되는 문구입니다.
    """

    status_code: int = 500
    code: str = "InternalFailure"
    default_message: str = "서버 오류가 발생했습니다"

    def __init__(
        self,
        message: Optional[str] = None,
        data: Optional[dict] = None,
        errors: Optional[List[str]] = None,
    ):
        self.message = message or self.default_message
        self.data = data
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message, "code": self.code}
        if self.data is not None:
            body["data"] = self.data
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailureError(AppError):
    status_code = 400
    code = "ValidationFailure"
    default_message = "입력값이 올바르지 않습니다"


class DuplicateAccountError(AppError):
    status_code = 409
    code = "DuplicateAccount"
    default_message = "이미 존재하는 사용자입니다"


class InvalidCredentialsError(AppError):
    status_code = 401
    code = "InvalidCredentials"
    default_message = "이메일 또는 비밀번호가 잘못되었습니다"


class EmailNotVerifiedError(AppError):
    status_code = 403
    code = "EmailNotVerified"
    default_message = "이메일 인증이 필요합니다. 메일함에서 인증 코드를 확인해주세요"

    def __init__(self, email: str, message: Optional[str] = None):
        super().__init__(
            message,
            data={"email": email, "email_verification_required": True},
        )
        self.email = email


class InvalidOrExpiredCodeError(AppError):
    status_code = 400
    code = "InvalidOrExpiredCode"
    default_message = "유효하지 않거나 만료된 코드입니다"


class AlreadyVerifiedError(AppError):
    status_code = 400
    code = "AlreadyVerified"
    default_message = "이미 인증된 이메일입니다"


class NotFoundOrForbiddenError(AppError):
    status_code = 404
    code = "NotFoundOrForbidden"
    default_message = "찾을 수 없거나 접근 권한이 없습니다"


class DuplicateEntryError(AppError):
    status_code = 409
    code = "DuplicateEntry"
    default_message = "이미 추가된 항목입니다"


class EntryNotFoundError(AppError):
    status_code = 404
    code = "EntryNotFound"
    default_message = "항목을 찾을 수 없습니다"


class AlreadyReportedError(AppError):
    status_code = 409
    code = "AlreadyReported"
    default_message = "이미 신고한 리뷰입니다"


class InvalidTokenError(AppError):
    status_code = 401
    code = "InvalidToken"
    default_message = "유효하지 않은 토큰입니다"


class InternalFailureError(AppError):
    status_code = 500
    code = "InternalFailure"


class MailDeliveryError(InternalFailureError):
    default_message = "메일 발송에 실패했습니다"


class CatalogError(InternalFailureError):
    default_message = "영화 정보를 불러오는데 실패했습니다"
