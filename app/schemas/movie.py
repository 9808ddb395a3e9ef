# app/schemas/movie.py

from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import date


class MovieSummary(BaseModel):
    id: int = Field(description="TMDB 영화 ID")
    title: str = Field(default="", description="영화 제목")
    original_title: Optional[str] = Field(default=None, description="원제")
    overview: Optional[str] = Field(default=None, description="줄거리")
    poster: Optional[str] = Field(default=None, description="포스터 URL")
    backdrop: Optional[str] = Field(default=None, description="배경 이미지 URL")
    release_date: Optional[date] = Field(default=None, description="개봉일")
    rating: float = Field(default=0.0, description="TMDB 평균 평점")
    vote_count: int = Field(default=0, description="투표 수")
    genre_ids: List[int] = Field(default_factory=list, description="장르 ID 목록")
    adult: bool = Field(default=False, description="성인 영화 여부")
    original_language: Optional[str] = Field(default=None, description="원어")
    popularity: float = Field(default=0.0, description="인기도")


class MoviePage(BaseModel):
    page: int = Field(default=1, description="현재 페이지")
    total_pages: int = Field(default=0, description="전체 페이지 수")
    total_results: int = Field(default=0, description="전체 결과 수")
    results: List[MovieSummary] = Field(default_factory=list, description="영화 목록")


class Genre(BaseModel):
    id: int = Field(description="장르 ID")
    name: str = Field(description="장르 이름")


class CastMember(BaseModel):
    id: int = Field(description="인물 ID")
    name: str = Field(description="이름")
    character: Optional[str] = Field(default=None, description="배역")
    profile_path: Optional[str] = Field(default=None, description="프로필 이미지 URL")
    order: Optional[int] = Field(default=None, description="출연 순서")


class CrewMember(BaseModel):
    id: int = Field(description="인물 ID")
    name: str = Field(description="이름")
    job: Optional[str] = Field(default=None, description="직무")
    department: Optional[str] = Field(default=None, description="부서")
    profile_path: Optional[str] = Field(default=None, description="프로필 이미지 URL")


class Video(BaseModel):
    id: Optional[str] = Field(default=None, description="영상 ID")
    key: Optional[str] = Field(default=None, description="영상 키")
    name: Optional[str] = Field(default=None, description="영상 제목")
    site: Optional[str] = Field(default=None, description="호스팅 사이트")
    type: Optional[str] = Field(default=None, description="영상 종류")
    url: Optional[str] = Field(default=None, description="영상 URL")


class MovieDetail(BaseModel):
    id: int = Field(description="TMDB 영화 ID")
    title: str = Field(default="", description="영화 제목")
    original_title: Optional[str] = Field(default=None, description="원제")
    overview: Optional[str] = Field(default=None, description="줄거리")
    poster: Optional[str] = Field(default=None, description="포스터 URL")
    backdrop: Optional[str] = Field(default=None, description="배경 이미지 URL")
    release_date: Optional[date] = Field(default=None, description="개봉일")
    rating: float = Field(default=0.0, description="TMDB 평균 평점")
    vote_count: int = Field(default=0, description="투표 수")
    runtime: Optional[int] = Field(default=None, description="상영시간(분)")
    budget: Optional[int] = Field(default=None, description="제작비")
    revenue: Optional[int] = Field(default=None, description="수익")
    status: Optional[str] = Field(default=None, description="개봉 상태")
    tagline: Optional[str] = Field(default=None, description="태그라인")
    homepage: Optional[str] = Field(default=None, description="홈페이지")
    imdb_id: Optional[str] = Field(default=None, description="IMDb ID")
    original_language: Optional[str] = Field(default=None, description="원어")
    popularity: float = Field(default=0.0, description="인기도")
    adult: bool = Field(default=False, description="성인 영화 여부")
    genres: List[Genre] = Field(default_factory=list, description="장르")
    cast: List[CastMember] = Field(default_factory=list, description="출연진 (상위 15명)")
    crew: List[CrewMember] = Field(default_factory=list, description="제작진 (상위 10명)")
    director: str = Field(default="Unknown", description="감독")
    producer: str = Field(default="Unknown", description="제작자")
    writer: str = Field(default="Unknown", description="각본가")
    trailer: Optional[str] = Field(default=None, description="트레일러 URL")
    teaser: Optional[str] = Field(default=None, description="티저 URL")
    videos: List[Video] = Field(default_factory=list, description="영상 목록")


class MovieFilters(BaseModel):
    """TMDB discover 필터"""

    genres: Optional[List[int]] = Field(default=None, description="장르 ID 목록 (AND)")
    year: Optional[int] = Field(default=None, ge=1874, le=2100, description="개봉 연도")
    min_rating: Optional[float] = Field(default=None, ge=0, le=10, description="최소 평점")
    max_rating: Optional[float] = Field(default=None, ge=0, le=10, description="최대 평점")
    release_date_from: Optional[date] = Field(default=None, description="개봉일 시작")
    release_date_to: Optional[date] = Field(default=None, description="개봉일 끝")
    min_runtime: Optional[int] = Field(default=None, ge=0, description="최소 상영시간(분)")
    max_runtime: Optional[int] = Field(default=None, ge=0, description="최대 상영시간(분)")
    language: Optional[str] = Field(default=None, min_length=2, max_length=2, description="원어 (ISO 639-1)")
    min_votes: Optional[int] = Field(default=None, ge=0, description="최소 투표 수")
    sort_by: str = Field(default="popularity.desc", description="정렬 기준")
    page: int = Field(default=1, ge=1, le=500, description="페이지")
