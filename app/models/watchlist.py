# app/models/watchlist.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class WatchlistModel(Base):
    __tablename__ = "watchlists"

    watchlist_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), default="", nullable=False)
    is_public = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )

    owner = relationship("UserModel")
    movies = relationship(
        "WatchlistMovieModel",
        order_by="WatchlistMovieModel.entry_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<WatchlistModel(id={self.watchlist_id}, user_id={self.user_id}, name='{self.name}')>"


class WatchlistMovieModel(Base):
    __tablename__ = "watchlist_movies"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    watchlist_id = Column(Integer, ForeignKey("watchlists.watchlist_id"), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    poster = Column(Text, nullable=True)
    added_at = Column(DateTime, default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint("watchlist_id", "movie_id", name="unique_watchlist_movie"),
    )

    def __repr__(self):
        return f"<WatchlistMovieModel(watchlist_id={self.watchlist_id}, movie_id={self.movie_id})>"
