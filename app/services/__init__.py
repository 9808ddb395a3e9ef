# app/services/__init__.py

from .tmdb_service import TMDBService
from .mail_service import MailService
from .auth_service import AuthService
from .user_service import UserService
from .watchlist_service import WatchlistService
from .review_service import ReviewService

__all__ = [
    "TMDBService",
    "MailService",
    "AuthService",
    "UserService",
    "WatchlistService",
    "ReviewService",
]
