# app/schemas/__init__.py

from .common import ApiResponse, Pagination
from .user import (
    User,
    UserProfile,
    UserCreate,
    UserLogin,
    EmailRequest,
    VerifyEmailRequest,
    ResetPasswordRequest,
    AuthData,
)
from .movie import MovieSummary, MoviePage, MovieDetail, MovieFilters, Genre
from .watchlist import Watchlist, WatchlistCreate, WatchlistUpdate, WatchlistMovieCreate
from .review import Review, ReviewCreate, ReviewReportCreate, ReviewStats

__all__ = [
    "ApiResponse",
    "Pagination",
    "User",
    "UserProfile",
    "UserCreate",
    "UserLogin",
    "EmailRequest",
    "VerifyEmailRequest",
    "ResetPasswordRequest",
    "AuthData",
    "MovieSummary",
    "MoviePage",
    "MovieDetail",
    "MovieFilters",
    "Genre",
    "Watchlist",
    "WatchlistCreate",
    "WatchlistUpdate",
    "WatchlistMovieCreate",
    "Review",
    "ReviewCreate",
    "ReviewReportCreate",
    "ReviewStats",
]
