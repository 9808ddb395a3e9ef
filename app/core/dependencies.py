# app/core/dependencies.py

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import UserModel
from app.core.config import Settings, get_settings
from app.core.exceptions import AppError, InvalidTokenError, EmailNotVerifiedError
from app.services.auth_service import AuthService
from app.services.mail_service import MailService
from app.services.tmdb_service import TMDBService
from app.services.user_service import UserService
from app.services.watchlist_service import WatchlistService
from app.services.review_service import ReviewService

security = HTTPBearer(auto_error=False)


def get_mail_service(settings: Settings = Depends(get_settings)) -> MailService:
    return MailService(settings)


def get_tmdb_service(settings: Settings = Depends(get_settings)) -> TMDBService:
    return TMDBService(settings)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mail_service: MailService = Depends(get_mail_service),
) -> AuthService:
    return AuthService(db, settings, mail_service)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserModel:
    """현재 로그인한 사용자 조회"""
    if not credentials:
        raise InvalidTokenError("토큰이 필요합니다")

    return auth_service.get_user_from_token(credentials.credentials)


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[UserModel]:
    """현재 로그인한 사용자 조회 None 허용"""
    if not credentials:
        return None

    try:
        return auth_service.get_user_from_token(credentials.credentials)
    except AppError:
        return None


async def get_verified_user(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    """이메일 인증을 마친 사용자만 허용"""
    if not current_user.is_email_verified:
        raise EmailNotVerifiedError(current_user.email)
    return current_user
