# app/core/auth.py

import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import Settings
from app.core.exceptions import InvalidTokenError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

CODE_MIN = 100000
CODE_MAX = 999999


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """비밀번호 검증"""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """비밀번호 해시화"""
    return pwd_context.hash(password)


def generate_verification_code() -> str:
    """6자리 숫자 인증 코드 생성 (이메일 인증, 비밀번호 재설정 공용)"""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def codes_match(stored_code: Optional[str], candidate: str) -> bool:
    if not stored_code or not candidate:
        return False
    return secrets.compare_digest(stored_code.encode(), candidate.encode())


def create_access_token(
    user_id: int, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    """JWT 액세스 토큰 생성"""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> int:
    """JWT 토큰 검증 후 사용자 ID 반환"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidTokenError()

    subject = payload.get("sub")
    if subject is None:
        raise InvalidTokenError()
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise InvalidTokenError()
