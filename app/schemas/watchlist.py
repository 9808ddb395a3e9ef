# app/schemas/watchlist.py

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from app.schemas.common import Pagination


class WatchlistMovie(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID")
    title: str = Field(description="영화 제목")
    poster: Optional[str] = Field(default=None, description="포스터 URL")
    added_at: Optional[datetime] = Field(default=None, description="추가일시")

    class Config:
        from_attributes = True


class Watchlist(BaseModel):
    watchlist_id: int = Field(description="왓치리스트 ID")
    user_id: int = Field(description="소유자 ID")
    owner_username: Optional[str] = Field(default=None, description="소유자 이름")
    name: str = Field(description="이름")
    description: str = Field(default="", description="설명")
    is_public: bool = Field(default=False, description="공개 여부")
    movies: List[WatchlistMovie] = Field(default_factory=list, description="영화 목록")
    movie_count: int = Field(default=0, description="영화 수")
    created_at: Optional[datetime] = Field(default=None, description="생성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")


class WatchlistCreate(BaseModel):
    name: str = Field(description="이름", min_length=1, max_length=100)
    description: str = Field(default="", description="설명", max_length=500)
    is_public: bool = Field(default=False, description="공개 여부")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("왓치리스트 이름은 필수입니다")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> str:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class WatchlistUpdate(WatchlistCreate):
    pass


class WatchlistMovieCreate(BaseModel):
    movie_id: int = Field(description="TMDB 영화 ID", ge=1)
    title: str = Field(description="영화 제목", min_length=1, max_length=200)
    poster: Optional[str] = Field(default=None, description="포스터 URL")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("영화 제목은 필수입니다")
        return value


class WatchlistPage(BaseModel):
    watchlists: List[Watchlist] = Field(default_factory=list, description="왓치리스트 목록")
    pagination: Pagination = Field(description="페이지 정보")
