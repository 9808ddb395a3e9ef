# app/models/user.py

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class UserModel(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(30), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar_url = Column(Text, nullable=True)
    bio = Column(String(500), nullable=True)

    # 환경설정
    theme = Column(String(10), default="light", nullable=False)
    preferred_genres = Column(JSON, default=list, nullable=False)

    # 이메일 인증
    is_email_verified = Column(Boolean, default=False, nullable=False)
    email_verification_token = Column(String(6), nullable=True)
    email_verification_expires = Column(DateTime, nullable=True)

    # 비밀번호 재설정
    password_reset_token = Column(String(6), nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp())
    last_login = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True)

    favorite_movies = relationship(
        "FavoriteMovieModel",
        order_by="FavoriteMovieModel.favorite_id",
        cascade="all, delete-orphan",
    )
    watched_movies = relationship(
        "WatchedMovieModel",
        order_by="WatchedMovieModel.watched_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<UserModel(id={self.user_id}, username='{self.username}')>"
