# app/models/review.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class ReviewModel(Base):
    __tablename__ = "reviews"

    review_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    movie_id = Column(Integer, nullable=False, index=True)
    movie_title = Column(String(200), nullable=False)
    rating = Column(Integer, nullable=False)
    content = Column(Text, nullable=True)
    is_spoiler = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )

    author = relationship("UserModel")
    likes = relationship("ReviewLikeModel", cascade="all, delete-orphan")
    reports = relationship("ReviewReportModel", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_user_movie_review"),
        CheckConstraint("rating >= 1 AND rating <= 10", name="check_review_rating"),
    )

    def __repr__(self):
        return f"<ReviewModel(id={self.review_id}, movie_id={self.movie_id}, rating={self.rating})>"


class ReviewLikeModel(Base):
    __tablename__ = "review_likes"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    review_id = Column(Integer, ForeignKey("reviews.review_id"), primary_key=True)
    created_at = Column(DateTime, default=func.current_timestamp())

    def __repr__(self):
        return f"<ReviewLikeModel(user_id={self.user_id}, review_id={self.review_id})>"


class ReviewReportModel(Base):
    __tablename__ = "review_reports"

    report_id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(Integer, ForeignKey("reviews.review_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    reason = Column(String(500), nullable=False)
    created_at = Column(DateTime, default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="unique_review_report"),
    )

    def __repr__(self):
        return f"<ReviewReportModel(review_id={self.review_id}, user_id={self.user_id})>"
