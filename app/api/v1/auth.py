# app/api/v1/auth.py

from fastapi import APIRouter, BackgroundTasks, Depends, status
from app.models.user import UserModel
from app.schemas.common import ApiResponse
from app.schemas.user import (
    User,
    UserCreate,
    UserLogin,
    EmailRequest,
    VerifyEmailRequest,
    ResetPasswordRequest,
    VerificationStatus,
)
from app.services.auth_service import AuthService
from app.core.dependencies import get_auth_service, get_current_user

router = APIRouter()


# 이메일 회원가입
@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="회원가입",
    description="계정을 만들고 이메일로 6자리 인증 코드를 발송합니다. 인증 전에는 로그인할 수 없습니다.",
)
async def register(
    user_data: UserCreate,
    background_tasks: BackgroundTasks,
    auth_service: AuthService = Depends(get_auth_service),
):
    auth_data = await auth_service.register(user_data, background_tasks)
    return ApiResponse(
        message="회원가입이 완료되었습니다. 이메일로 발송된 인증 코드를 입력해주세요",
        data=auth_data,
    )


@router.post(
    "/login",
    response_model=ApiResponse,
    summary="로그인",
    description="이메일 인증을 마친 계정만 로그인할 수 있습니다.",
)
async def login(login_data: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    auth_data = await auth_service.login(login_data.email, login_data.password)
    return ApiResponse(message="로그인 성공", data=auth_data)


@router.post(
    "/verify-email",
    response_model=ApiResponse,
    summary="이메일 인증",
    description="회원가입시 받은 6자리 코드로 이메일을 인증합니다.",
)
async def verify_email(
    request: VerifyEmailRequest,
    background_tasks: BackgroundTasks,
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.verify_email(request.email, request.code, background_tasks)
    return ApiResponse(message="이메일 인증이 완료되었습니다", data={"user": user})


@router.post(
    "/resend-verification-code",
    response_model=ApiResponse,
    summary="인증 코드 재발송 (이메일)",
    description="로그인 없이 이메일 주소로 인증 코드를 다시 받습니다.",
)
async def resend_verification_code(
    request: EmailRequest, auth_service: AuthService = Depends(get_auth_service)
):
    await auth_service.resend_verification_by_email(request.email)
    return ApiResponse(message="인증 코드가 재발송되었습니다")


@router.post(
    "/resend-verification",
    response_model=ApiResponse,
    summary="인증 코드 재발송",
    description="로그인한 사용자에게 인증 코드를 다시 보냅니다.",
)
async def resend_verification(
    current_user: UserModel = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    await auth_service.resend_verification(current_user)
    return ApiResponse(message="인증 코드가 재발송되었습니다")


@router.post(
    "/forgot-password",
    response_model=ApiResponse,
    summary="비밀번호 재설정 코드 요청",
    description="가입 여부와 상관없이 같은 응답을 반환합니다.",
)
async def forgot_password(request: EmailRequest, auth_service: AuthService = Depends(get_auth_service)):
    message = await auth_service.forgot_password(request.email)
    return ApiResponse(message=message)


@router.post(
    "/reset-password",
    response_model=ApiResponse,
    summary="비밀번호 재설정",
)
async def reset_password(
    request: ResetPasswordRequest, auth_service: AuthService = Depends(get_auth_service)
):
    await auth_service.reset_password(request.email, request.code, request.new_password)
    return ApiResponse(message="비밀번호가 재설정되었습니다. 새 비밀번호로 로그인해주세요")


@router.get(
    "/me",
    response_model=ApiResponse,
    summary="내 정보 조회",
)
async def get_me(current_user: UserModel = Depends(get_current_user)):
    return ApiResponse(data={"user": User.from_model(current_user)})


@router.get(
    "/verification-status",
    response_model=ApiResponse,
    summary="이메일 인증 상태 조회",
)
async def get_verification_status(current_user: UserModel = Depends(get_current_user)):
    return ApiResponse(
        data=VerificationStatus(
            is_email_verified=current_user.is_email_verified,
            email=current_user.email,
        )
    )
