# app/services/auth_service.py

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional
from fastapi import BackgroundTasks
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import UserModel
from app.schemas.user import User, UserCreate, AuthData
from app.core.config import Settings
from app.core.auth import (
    get_password_hash,
    verify_password,
    generate_verification_code,
    codes_match,
    create_access_token,
    decode_access_token,
)
from app.core.exceptions import (
    AppError,
    DuplicateAccountError,
    InvalidCredentialsError,
    EmailNotVerifiedError,
    InvalidOrExpiredCodeError,
    AlreadyVerifiedError,
    NotFoundOrForbiddenError,
    InvalidTokenError,
)
from app.services.mail_service import MailService

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "해당 이메일로 가입된 계정이 있다면 비밀번호 재설정 코드가 발송되었습니다"


class AuthService:
    """회원가입, 이메일 인증, 로그인, 비밀번호 재설정

    계정 상태는 PendingVerification(미인증) -> Verified(인증 완료) 로만 이동하고,
    비밀번호 재설정은 인증 상태를 바꾸지 않습니다. 인증/재설정 코드는 사용 즉시
    토큰과 만료시간을 모두 비워 재사용할 수 없게 합니다.
    """

    def __init__(self, db: Session, settings: Settings, mail_service: MailService):
        self.db = db
        self.settings = settings
        self.mail = mail_service

    def _get_by_email(self, email: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def _issue_verification_code(self, user_model: UserModel) -> str:
        code = generate_verification_code()
        user_model.email_verification_token = code
        user_model.email_verification_expires = datetime.utcnow() + timedelta(
            minutes=self.settings.verification_code_expire_minutes
        )
        return code

    def _auth_data(self, user_model: UserModel, verification_required: bool) -> AuthData:
        return AuthData(
            token=create_access_token(user_model.user_id, self.settings),
            user=User.from_model(user_model),
            email_verification_required=verification_required,
        )

    @staticmethod
    def _code_is_valid(stored: Optional[str], expires: Optional[datetime], candidate: str) -> bool:
        if not stored or not expires:
            return False
        if expires <= datetime.utcnow():
            return False
        return codes_match(stored, candidate)

    @staticmethod
    async def _deliver_quietly(send: Callable[..., Awaitable[None]], *args) -> None:
        """상태 변경이 커밋된 뒤 실행되는 알림 발송 (실패해도 상태는 유지)"""
        try:
            await send(*args)
        except AppError:
            logger.warning("알림 메일 발송 실패 (상태 변경은 유지됨): %s", args[0])
        except Exception:
            logger.exception("알림 메일 발송 중 예기치 않은 오류: %s", args[0])

    async def register(self, user_data: UserCreate, background_tasks: BackgroundTasks) -> AuthData:
        # 사용자 이름 / 이메일 중복 체크
        stmt = select(UserModel).where(
            or_(UserModel.email == user_data.email, UserModel.username == user_data.username)
        )
        if self.db.execute(stmt).first():
            raise DuplicateAccountError()

        user_model = UserModel(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            is_email_verified=False,
            theme="light",
            preferred_genres=[],
        )
        code = self._issue_verification_code(user_model)

        self.db.add(user_model)
        try:
            self.db.commit()
        except IntegrityError:
            # 동시 가입으로 유니크 제약에 걸린 경우
            self.db.rollback()
            raise DuplicateAccountError()
        self.db.refresh(user_model)
        logger.info("회원가입 완료: user_id=%s", user_model.user_id)

        background_tasks.add_task(
            self._deliver_quietly,
            self.mail.send_verification_code,
            user_model.email,
            code,
            user_model.username,
        )

        return self._auth_data(user_model, verification_required=True)

    async def login(self, email: str, password: str) -> AuthData:
        user_model = self._get_by_email(email)

        # 계정 존재 여부를 노출하지 않도록 동일한 에러 사용
        if not user_model or not user_model.is_active or not verify_password(
            password, user_model.password_hash
        ):
            raise InvalidCredentialsError()

        if not user_model.is_email_verified:
            raise EmailNotVerifiedError(
                user_model.email,
                "로그인 전에 이메일 인증을 완료해주세요. 메일함에서 인증 코드를 확인하세요",
            )

        user_model.last_login = datetime.utcnow()
        self.db.commit()
        self.db.refresh(user_model)

        return self._auth_data(user_model, verification_required=False)

    async def verify_email(self, email: str, code: str, background_tasks: BackgroundTasks) -> User:
        user_model = self._get_by_email(email)
        if not user_model or not self._code_is_valid(
            user_model.email_verification_token, user_model.email_verification_expires, code
        ):
            raise InvalidOrExpiredCodeError("유효하지 않거나 만료된 인증 코드입니다")

        user_model.is_email_verified = True
        user_model.email_verification_token = None
        user_model.email_verification_expires = None
        self.db.commit()
        self.db.refresh(user_model)
        logger.info("이메일 인증 완료: user_id=%s", user_model.user_id)

        background_tasks.add_task(
            self._deliver_quietly,
            self.mail.send_welcome_email,
            user_model.email,
            user_model.username,
        )

        return User.from_model(user_model)

    async def resend_verification(self, user_model: UserModel) -> None:
        if user_model.is_email_verified:
            raise AlreadyVerifiedError()

        code = self._issue_verification_code(user_model)
        self.db.commit()

        # 발송 실패는 MailDeliveryError 로 호출자에게 전달 (새 코드는 유지)
        await self.mail.send_verification_code(user_model.email, code, user_model.username)

    async def resend_verification_by_email(self, email: str) -> None:
        user_model = self._get_by_email(email)
        if not user_model:
            raise NotFoundOrForbiddenError("사용자를 찾을 수 없습니다")
        await self.resend_verification(user_model)

    async def forgot_password(self, email: str) -> str:
        user_model = self._get_by_email(email)
        if not user_model:
            return FORGOT_PASSWORD_MESSAGE

        code = generate_verification_code()
        user_model.password_reset_token = code
        user_model.password_reset_expires = datetime.utcnow() + timedelta(
            minutes=self.settings.password_reset_code_expire_minutes
        )
        self.db.commit()

        await self.mail.send_password_reset_code(user_model.email, code, user_model.username)
        return FORGOT_PASSWORD_MESSAGE

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        user_model = self._get_by_email(email)
        if not user_model or not self._code_is_valid(
            user_model.password_reset_token, user_model.password_reset_expires, code
        ):
            raise InvalidOrExpiredCodeError("유효하지 않거나 만료된 재설정 코드입니다")

        user_model.password_hash = get_password_hash(new_password)
        user_model.password_reset_token = None
        user_model.password_reset_expires = None
        self.db.commit()
        logger.info("비밀번호 재설정 완료: user_id=%s", user_model.user_id)

    def get_user_from_token(self, token: str) -> UserModel:
        user_id = decode_access_token(token, self.settings)
        user_model = self.db.get(UserModel, user_id)
        if not user_model or not user_model.is_active:
            raise InvalidTokenError()
        return user_model
