# app/api/v1/movies.py

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from pydantic import ValidationError
from app.models.user import UserModel
from app.schemas.common import ApiResponse
from app.schemas.movie import MovieFilters
from app.services.tmdb_service import TMDBService
from app.core.dependencies import get_current_user, get_tmdb_service
from app.core.exceptions import ValidationFailureError

router = APIRouter()

# 고정 경로는 /{movie_id} 보다 먼저 선언해야 함


@router.get(
    "/search",
    response_model=ApiResponse,
    summary="영화 검색",
    description="TMDB에서 제목으로 영화를 검색합니다.",
)
async def search_movies(
    q: str = Query(min_length=1, description="검색어"),
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.search_movies(q.strip(), page))


@router.get(
    "/discover",
    response_model=ApiResponse,
    summary="조건별 영화 탐색",
    description="장르, 연도, 평점, 개봉일, 상영시간, 언어, 투표 수로 영화를 필터링합니다.",
)
async def discover_movies(
    genres: Optional[List[int]] = Query(default=None, description="장르 ID (여러 개 지정 가능)"),
    year: Optional[int] = Query(default=None, description="개봉 연도"),
    min_rating: Optional[float] = Query(default=None, description="최소 평점"),
    max_rating: Optional[float] = Query(default=None, description="최대 평점"),
    release_date_from: Optional[date] = Query(default=None, description="개봉일 시작"),
    release_date_to: Optional[date] = Query(default=None, description="개봉일 끝"),
    min_runtime: Optional[int] = Query(default=None, description="최소 상영시간(분)"),
    max_runtime: Optional[int] = Query(default=None, description="최대 상영시간(분)"),
    language: Optional[str] = Query(default=None, description="원어 (ISO 639-1)"),
    min_votes: Optional[int] = Query(default=None, description="최소 투표 수"),
    sort_by: str = Query(default="popularity.desc", description="정렬 기준"),
    page: int = Query(default=1, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    try:
        filters = MovieFilters(
            genres=genres,
            year=year,
            min_rating=min_rating,
            max_rating=max_rating,
            release_date_from=release_date_from,
            release_date_to=release_date_to,
            min_runtime=min_runtime,
            max_runtime=max_runtime,
            language=language,
            min_votes=min_votes,
            sort_by=sort_by,
            page=page,
        )
    except ValidationError as e:
        raise ValidationFailureError(
            errors=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        )

    return ApiResponse(data=await tmdb_service.discover_movies(filters))


@router.get("/discover/popular", response_model=ApiResponse, summary="인기 영화")
async def get_popular_movies(
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_popular_movies(page))


@router.get("/discover/top-rated", response_model=ApiResponse, summary="평점 높은 영화")
async def get_top_rated_movies(
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_top_rated_movies(page))


@router.get("/discover/now-playing", response_model=ApiResponse, summary="현재 상영작")
async def get_now_playing_movies(
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_now_playing_movies(page))


@router.get("/discover/upcoming", response_model=ApiResponse, summary="개봉 예정작")
async def get_upcoming_movies(
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_upcoming_movies(page))


@router.get("/genre/{genre_id}", response_model=ApiResponse, summary="장르별 영화")
async def get_movies_by_genre(
    genre_id: int = Path(description="TMDB 장르 ID"),
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_movies_by_genre(genre_id, page))


@router.get("/data/genres", response_model=ApiResponse, summary="장르 목록")
async def get_genres(tmdb_service: TMDBService = Depends(get_tmdb_service)):
    return ApiResponse(data={"genres": await tmdb_service.get_genres()})


@router.get(
    "/recommendations/personalized",
    response_model=ApiResponse,
    summary="맞춤 추천",
    description="선호 장르 중 하나를 골라 추천합니다. 선호 장르가 없으면 인기 영화를 반환합니다.",
)
async def get_personalized_recommendations(
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    current_user: UserModel = Depends(get_current_user),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    movies = await tmdb_service.get_personalized_movies(list(current_user.preferred_genres or []), page)
    return ApiResponse(data=movies)


@router.get(
    "/{movie_id}",
    response_model=ApiResponse,
    summary="영화 상세 정보",
    description="출연진, 제작진, 예고편을 포함한 영화 상세 정보를 조회합니다.",
)
async def get_movie_details(
    movie_id: int = Path(description="TMDB 영화 ID"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_movie_details(movie_id))


@router.get("/{movie_id}/similar", response_model=ApiResponse, summary="비슷한 영화")
async def get_similar_movies(
    movie_id: int = Path(description="TMDB 영화 ID"),
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_similar_movies(movie_id, page))


@router.get("/{movie_id}/recommendations", response_model=ApiResponse, summary="추천 영화")
async def get_movie_recommendations(
    movie_id: int = Path(description="TMDB 영화 ID"),
    page: int = Query(default=1, ge=1, le=500, description="페이지"),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
):
    return ApiResponse(data=await tmdb_service.get_movie_recommendations(movie_id, page))
