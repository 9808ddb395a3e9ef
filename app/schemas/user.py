# app/schemas/user.py

from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class Preferences(BaseModel):
    theme: Literal["light", "dark"] = Field(default="light", description="테마")
    genres: List[str] = Field(default_factory=list, description="선호 장르 ID 목록")


class FavoriteMovie(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID")
    title: str = Field(description="영화 제목")
    poster: Optional[str] = Field(default=None, description="포스터 URL")
    added_at: Optional[datetime] = Field(default=None, description="추가일시")

    class Config:
        from_attributes = True


class WatchedMovie(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID")
    title: str = Field(description="영화 제목")
    poster: Optional[str] = Field(default=None, description="포스터 URL")
    watched_at: Optional[datetime] = Field(default=None, description="시청일시")
    rating: Optional[int] = Field(default=None, description="평점 (1 ~ 10)")

    class Config:
        from_attributes = True


class User(BaseModel):
    user_id: int = Field(description="사용자 ID")
    username: str = Field(description="사용자 이름")
    email: str = Field(description="이메일")
    avatar_url: Optional[str] = Field(default=None, description="아바타 URL")
    bio: Optional[str] = Field(default=None, description="자기소개")
    is_email_verified: bool = Field(default=False, description="이메일 인증 여부")
    preferences: Preferences = Field(default_factory=Preferences, description="환경설정")
    created_at: Optional[datetime] = Field(default=None, description="생성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")
    last_login: Optional[datetime] = Field(default=None, description="마지막 로그인")
    is_active: bool = Field(default=True, description="활성 상태")

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, user_model) -> "User":
        return cls(
            user_id=user_model.user_id,
            username=user_model.username,
            email=user_model.email,
            avatar_url=user_model.avatar_url,
            bio=user_model.bio,
            is_email_verified=user_model.is_email_verified,
            preferences=Preferences(
                theme=user_model.theme or "light",
                genres=list(user_model.preferred_genres or []),
            ),
            created_at=user_model.created_at,
            updated_at=user_model.updated_at,
            last_login=user_model.last_login,
            is_active=user_model.is_active if user_model.is_active is not None else True,
        )


class UserStats(BaseModel):
    total_favorites: int = Field(default=0, description="즐겨찾기 수")
    total_watched: int = Field(default=0, description="시청한 영화 수")
    average_rating: float = Field(default=0.0, description="시청 영화 평균 평점")


class UserProfile(User):
    """프로필 상세 (즐겨찾기, 시청 기록, 통계 포함)"""

    favorite_movies: List[FavoriteMovie] = Field(default_factory=list, description="즐겨찾기")
    watched_movies: List[WatchedMovie] = Field(default_factory=list, description="시청 기록")
    stats: UserStats = Field(default_factory=UserStats, description="통계")


class UserMinimal(BaseModel):
    user_id: int = Field(description="사용자 ID")
    username: str = Field(description="사용자 이름")
    avatar_url: Optional[str] = Field(default=None, description="아바타 URL")
    is_email_verified: bool = Field(description="이메일 인증 여부")
    theme: str = Field(default="light", description="테마")


class UserCreate(BaseModel):
    username: str = Field(description="사용자 이름", min_length=3, max_length=30)
    email: EmailStr = Field(description="이메일")
    password: str = Field(description="비밀번호", min_length=6)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("사용자 이름은 3자 이상이어야 합니다")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserLogin(BaseModel):
    email: EmailStr = Field(description="이메일")
    password: str = Field(description="비밀번호", min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class EmailRequest(BaseModel):
    email: EmailStr = Field(description="이메일")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class VerifyEmailRequest(EmailRequest):
    code: str = Field(description="6자리 인증 코드", min_length=6, max_length=6)


class ResetPasswordRequest(EmailRequest):
    code: str = Field(description="6자리 재설정 코드", min_length=6, max_length=6)
    new_password: str = Field(description="새 비밀번호", min_length=6)


class AuthData(BaseModel):
    token: str = Field(description="액세스 토큰")
    token_type: str = Field(default="bearer", description="토큰 타입")
    user: User = Field(description="사용자 정보")
    email_verification_required: bool = Field(description="이메일 인증 필요 여부")


class VerificationStatus(BaseModel):
    is_email_verified: bool = Field(description="이메일 인증 여부")
    email: str = Field(description="이메일")


class UserProfileUpdate(BaseModel):
    """사용자 프로필 수정 요청"""

    username: Optional[str] = Field(default=None, min_length=3, max_length=30, description="변경할 사용자 이름")
    email: Optional[EmailStr] = Field(default=None, description="변경할 이메일")
    bio: Optional[str] = Field(default=None, max_length=500, description="자기소개")
    avatar_url: Optional[str] = Field(default=None, description="아바타 URL")
    theme: Optional[Literal["light", "dark"]] = Field(default=None, description="테마")
    genres: Optional[List[str]] = Field(default=None, description="선호 장르 ID 목록")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value) if value is not None else None


class FavoriteMovieCreate(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID", ge=1)
    title: str = Field(description="영화 제목", min_length=1, max_length=200)
    poster: Optional[str] = Field(default=None, description="포스터 URL")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("영화 제목은 필수입니다")
        return value


class WatchedMovieCreate(FavoriteMovieCreate):
    rating: Optional[int] = Field(default=None, description="평점 (1 ~ 10)", ge=1, le=10)
