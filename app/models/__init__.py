# app/models/__init__.py

from .user import UserModel
from .favorite_movie import FavoriteMovieModel
from .watched_movie import WatchedMovieModel
from .watchlist import WatchlistModel, WatchlistMovieModel
from .review import ReviewModel, ReviewLikeModel, ReviewReportModel


__all__ = [
    "UserModel",
    "FavoriteMovieModel",
    "WatchedMovieModel",
    "WatchlistModel",
    "WatchlistMovieModel",
    "ReviewModel",
    "ReviewLikeModel",
    "ReviewReportModel",
]
