# app/models/favorite_movie.py

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base


class FavoriteMovieModel(Base):
    __tablename__ = "favorite_movies"

    favorite_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    poster = Column(Text, nullable=True)
    added_at = Column(DateTime, default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_favorite_movie"),
    )

    def __repr__(self):
        return f"<FavoriteMovieModel(user_id={self.user_id}, movie_id={self.movie_id})>"
