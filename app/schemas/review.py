# app/schemas/review.py

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from app.schemas.common import Pagination


class Review(BaseModel):
    review_id: int = Field(description="리뷰 ID")
    user_id: int = Field(description="작성자 ID")
    movie_id: int = Field(description="TMDB 영화 ID")
    movie_title: str = Field(description="영화 제목")
    rating: int = Field(description="평점 (1 ~ 10)")
    content: Optional[str] = Field(default=None, description="리뷰 내용")
    is_spoiler: bool = Field(default=False, description="스포일러 여부")
    likes_count: int = Field(default=0, description="좋아요 수")
    is_liked: bool = Field(default=False, description="현재 사용자 좋아요 여부")
    reports_count: int = Field(default=0, description="신고 수")
    created_at: Optional[datetime] = Field(default=None, description="생성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")

    # 사용자 정보 (조회시 포함)
    user_name: Optional[str] = Field(default=None, description="작성자 이름")
    user_avatar: Optional[str] = Field(default=None, description="작성자 아바타")


class ReviewCreate(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID", ge=1)
    title: str = Field(description="영화 제목", min_length=1, max_length=200)
    rating: int = Field(description="평점 (1 ~ 10)", ge=1, le=10)
    content: Optional[str] = Field(default=None, description="리뷰 내용", max_length=1000)
    is_spoiler: bool = Field(default=False, description="스포일러 여부")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("영화 제목은 필수입니다")
        return value


class ReviewReportCreate(BaseModel):
    reason: str = Field(description="신고 사유", min_length=1, max_length=500)


class ReviewLikeResult(BaseModel):
    review_id: int = Field(description="리뷰 ID")
    liked: bool = Field(description="좋아요 상태")
    likes_count: int = Field(description="좋아요 수")


class MovieReviewPage(BaseModel):
    reviews: List[Review] = Field(default_factory=list, description="리뷰 목록")
    average_rating: float = Field(default=0.0, description="평균 평점")
    total_reviews: int = Field(default=0, description="전체 리뷰 수")
    pagination: Pagination = Field(description="페이지 정보")


class ReviewPage(BaseModel):
    reviews: List[Review] = Field(default_factory=list, description="리뷰 목록")
    pagination: Pagination = Field(description="페이지 정보")


class ReviewStats(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID")
    total_reviews: int = Field(default=0, description="전체 리뷰 수")
    average_rating: float = Field(default=0.0, description="평균 평점")
    spoiler_count: int = Field(default=0, description="스포일러 리뷰 수")
    distribution: Dict[int, int] = Field(default_factory=dict, description="평점별 리뷰 수 (1 ~ 10)")
