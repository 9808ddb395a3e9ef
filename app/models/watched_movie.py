# app/models/watched_movie.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.sql import func
from app.database import Base


class WatchedMovieModel(Base):
    __tablename__ = "watched_movies"

    watched_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    poster = Column(Text, nullable=True)
    watched_at = Column(DateTime, default=func.current_timestamp())
    rating = Column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_watched_movie"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 10)", name="check_watched_rating"),
    )

    def __repr__(self):
        return f"<WatchedMovieModel(user_id={self.user_id}, movie_id={self.movie_id}, rating={self.rating})>"
