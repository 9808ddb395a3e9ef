# app/core/__init__.py

from .config import get_settings, Settings
from .auth import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_access_token,
)
from .exceptions import AppError

__all__ = [
    "get_settings",
    "Settings",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "decode_access_token",
    "AppError",
]
