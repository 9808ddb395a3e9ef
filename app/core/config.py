# app/core/config.py

from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """설정 클래스"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # 애플리케이션 설정
    app_name: str = Field(default="StreamVibe", description="애플리케이션 이름")
    debug: bool = Field(default=False, description="디버그 모드 (에러 상세 노출, SQL 로그)")
    api_prefix: str = Field(default="/api", description="API 경로 prefix")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="CORS 허용 origin"
    )

    # 데이터베이스 설정
    database_url: str = Field(default="sqlite:///./streamvibe.db", description="데이터베이스 URL")

    # JWT 인증 설정
    secret_key: str = Field(default="secret-jwt-key", description="JWT 토큰 암호화 키")
    algorithm: str = Field(default="HS256", description="JWT 알고리즘")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7, description="JWT 토큰 만료 시간(분)"
    )

    # 인증 코드 설정
    verification_code_expire_minutes: int = Field(default=60, description="이메일 인증 코드 만료 시간(분)")
    password_reset_code_expire_minutes: int = Field(default=60, description="비밀번호 재설정 코드 만료 시간(분)")

    # TMDB API 설정
    tmdb_api_key: str = Field(default="", description="TMDB API Key")
    tmdb_access_token: str = Field(default="", description="TMDB Access Token")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDB API URL")
    tmdb_image_base_url: str = Field(default="https://image.tmdb.org/t/p/", description="TMDB 이미지 URL")
    tmdb_timeout: float = Field(default=10.0, description="요청 타임아웃")
    tmdb_language: str = Field(default="ko-KR", description="TMDB 기본 언어")

    # 메일 (SMTP) 설정
    smtp_host: str = Field(default="", description="SMTP 서버")
    smtp_port: int = Field(default=587, description="SMTP 포트")
    smtp_username: str = Field(default="", description="SMTP 사용자")
    smtp_password: str = Field(default="", description="SMTP 비밀번호")
    smtp_use_tls: bool = Field(default=True, description="STARTTLS 사용 여부")
    mail_from: str = Field(default="no-reply@streamvibe.app", description="발신 주소")
    mail_from_name: str = Field(default="StreamVibe", description="발신자 이름")
    frontend_url: str = Field(default="http://localhost:5173", description="프런트엔드 URL")

    @property
    def tmdb_headers(self) -> dict[str, str]:
        """TMDB API 요청 헤더"""
        headers = {"Content-Type": "application/json"}
        if self.tmdb_access_token:
            headers["Authorization"] = f"Bearer {self.tmdb_access_token}"
        return headers

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
