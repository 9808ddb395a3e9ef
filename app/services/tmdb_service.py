# app/services/tmdb_service.py

import logging
import random
from typing import Any, Dict, List, Optional
import httpx
from datetime import datetime, date
from app.core.config import Settings
from app.core.exceptions import EntryNotFoundError, CatalogError, ValidationFailureError
from app.schemas.movie import (
    MovieSummary,
    MoviePage,
    MovieDetail,
    MovieFilters,
    Genre,
    CastMember,
    CrewMember,
    Video,
)

logger = logging.getLogger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="

SORT_OPTIONS = {
    "popularity.desc",
    "popularity.asc",
    "vote_average.desc",
    "vote_average.asc",
    "primary_release_date.desc",
    "primary_release_date.asc",
    "revenue.desc",
    "revenue.asc",
    "vote_count.desc",
    "vote_count.asc",
    "original_title.asc",
    "original_title.desc",
}


def build_discover_params(filters: MovieFilters) -> Dict[str, Any]:
    """discover 필터를 TMDB 쿼리 파라미터로 변환 (값이 없는 필터는 제외)"""
    if filters.sort_by not in SORT_OPTIONS:
        raise ValidationFailureError(f"지원하지 않는 정렬 기준입니다: {filters.sort_by}")

    params: Dict[str, Any] = {"page": filters.page, "sort_by": filters.sort_by}

    if filters.genres:
        params["with_genres"] = ",".join(str(g) for g in filters.genres)
    if filters.year is not None:
        params["primary_release_year"] = filters.year
    if filters.min_rating is not None:
        params["vote_average.gte"] = filters.min_rating
    if filters.max_rating is not None:
        params["vote_average.lte"] = filters.max_rating
    if filters.release_date_from is not None:
        params["primary_release_date.gte"] = filters.release_date_from.isoformat()
    if filters.release_date_to is not None:
        params["primary_release_date.lte"] = filters.release_date_to.isoformat()
    if filters.min_runtime is not None:
        params["with_runtime.gte"] = filters.min_runtime
    if filters.max_runtime is not None:
        params["with_runtime.lte"] = filters.max_runtime
    if filters.language:
        params["with_original_language"] = filters.language.lower()
    if filters.min_votes is not None:
        params["vote_count.gte"] = filters.min_votes

    return params


class TMDBService:

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.timeout = httpx.Timeout(self.settings.tmdb_timeout)
        self.default_language = self.settings.tmdb_language
        self.transport = transport

    def _get_image_url(self, path: Optional[str], size: str = "w500") -> Optional[str]:
        if not path:
            return None
        return f"{self.settings.tmdb_image_base_url}{size}{path}"

    def _parse_date(self, date_str: Optional[str]) -> Optional[date]:
        if not date_str:
            return None
        try:
            return datetime.strptime(date_str, "%Y-%m-%d").date()
        except (ValueError, TypeError):
            return None

    async def _get(self, path: str, params: Optional[dict] = None, not_found: Optional[str] = None) -> dict:
        """TMDB GET 요청

        404 는 not_found 메시지가 있을 때 EntryNotFoundError, 그 외 실패는 CatalogError
        """
        query = {"language": self.default_language}
        if self.settings.tmdb_api_key:
            query["api_key"] = self.settings.tmdb_api_key
        query.update(params or {})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.settings.tmdb_base_url}{path}",
                    params=query,
                    headers=self.settings.tmdb_headers,
                )
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404 and not_found:
                    raise EntryNotFoundError(not_found)
                logger.error("TMDB API 오류: %s %s", path, e.response.status_code)
                raise CatalogError()
            except httpx.RequestError as e:
                logger.error("TMDB 요청 실패: %s %s", path, e)
                raise CatalogError()

    def _format_movie(self, movie_data: dict) -> MovieSummary:
        return MovieSummary(
            id=movie_data.get("id"),
            title=movie_data.get("title") or "",
            original_title=movie_data.get("original_title"),
            overview=movie_data.get("overview"),
            poster=self._get_image_url(movie_data.get("poster_path"), "w500"),
            backdrop=self._get_image_url(movie_data.get("backdrop_path"), "w1280"),
            release_date=self._parse_date(movie_data.get("release_date")),
            rating=movie_data.get("vote_average") or 0.0,
            vote_count=movie_data.get("vote_count") or 0,
            genre_ids=movie_data.get("genre_ids") or [],
            adult=movie_data.get("adult", False),
            original_language=movie_data.get("original_language"),
            popularity=movie_data.get("popularity") or 0.0,
        )

    def _format_page(self, data: dict) -> MoviePage:
        return MoviePage(
            page=data.get("page", 1),
            total_pages=data.get("total_pages", 0),
            total_results=data.get("total_results", 0),
            results=[self._format_movie(m) for m in data.get("results", []) if m.get("id")],
        )

    def _video_url(self, video: dict) -> Optional[str]:
        if video.get("site") == "YouTube" and video.get("key"):
            return f"{YOUTUBE_WATCH_URL}{video['key']}"
        return None

    def _find_video(self, videos: List[dict], video_type: str) -> Optional[str]:
        for video in videos:
            if video.get("type") == video_type and video.get("site") == "YouTube":
                return self._video_url(video)
        return None

    def _format_movie_details(self, movie_data: dict) -> MovieDetail:
        credits = movie_data.get("credits") or {}
        cast = credits.get("cast") or []
        crew = credits.get("crew") or []
        videos = (movie_data.get("videos") or {}).get("results") or []

        def crew_name(*jobs: str) -> str:
            person = next((p for p in crew if p.get("job") in jobs), None)
            return person.get("name") if person and person.get("name") else "Unknown"

        return MovieDetail(
            id=movie_data.get("id"),
            title=movie_data.get("title") or "",
            original_title=movie_data.get("original_title"),
            overview=movie_data.get("overview"),
            poster=self._get_image_url(movie_data.get("poster_path"), "w500"),
            backdrop=self._get_image_url(movie_data.get("backdrop_path"), "w1280"),
            release_date=self._parse_date(movie_data.get("release_date")),
            rating=movie_data.get("vote_average") or 0.0,
            vote_count=movie_data.get("vote_count") or 0,
            runtime=movie_data.get("runtime"),
            budget=movie_data.get("budget"),
            revenue=movie_data.get("revenue"),
            status=movie_data.get("status"),
            tagline=movie_data.get("tagline"),
            homepage=movie_data.get("homepage"),
            imdb_id=movie_data.get("imdb_id"),
            original_language=movie_data.get("original_language"),
            popularity=movie_data.get("popularity") or 0.0,
            adult=movie_data.get("adult", False),
            genres=[Genre(id=g["id"], name=g.get("name", "")) for g in movie_data.get("genres") or []],
            cast=[
                CastMember(
                    id=actor.get("id"),
                    name=actor.get("name", ""),
                    character=actor.get("character"),
                    profile_path=self._get_image_url(actor.get("profile_path"), "w200"),
                    order=actor.get("order"),
                )
                for actor in cast[:15]
            ],
            crew=[
                CrewMember(
                    id=person.get("id"),
                    name=person.get("name", ""),
                    job=person.get("job"),
                    department=person.get("department"),
                    profile_path=self._get_image_url(person.get("profile_path"), "w200"),
                )
                for person in crew[:10]
            ],
            director=crew_name("Director"),
            producer=crew_name("Producer"),
            writer=crew_name("Writer", "Screenplay"),
            trailer=self._find_video(videos, "Trailer"),
            teaser=self._find_video(videos, "Teaser"),
            videos=[
                Video(
                    id=v.get("id"),
                    key=v.get("key"),
                    name=v.get("name"),
                    site=v.get("site"),
                    type=v.get("type"),
                    url=self._video_url(v),
                )
                for v in videos
            ],
        )

    async def search_movies(self, query: str, page: int = 1) -> MoviePage:
        data = await self._get(
            "/search/movie",
            {"query": query, "page": page, "include_adult": "false"},
        )
        return self._format_page(data)

    async def get_movie_details(self, movie_id: int) -> MovieDetail:
        data = await self._get(
            f"/movie/{movie_id}",
            {"append_to_response": "credits,videos"},
            not_found=f"영화를 찾을 수 없습니다 (ID: {movie_id})",
        )
        return self._format_movie_details(data)

    async def get_popular_movies(self, page: int = 1) -> MoviePage:
        return self._format_page(await self._get("/movie/popular", {"page": page}))

    async def get_top_rated_movies(self, page: int = 1) -> MoviePage:
        return self._format_page(await self._get("/movie/top_rated", {"page": page}))

    async def get_now_playing_movies(self, page: int = 1) -> MoviePage:
        return self._format_page(await self._get("/movie/now_playing", {"page": page}))

    async def get_upcoming_movies(self, page: int = 1) -> MoviePage:
        return self._format_page(await self._get("/movie/upcoming", {"page": page}))

    async def get_movies_by_genre(self, genre_id: int, page: int = 1) -> MoviePage:
        data = await self._get(
            "/discover/movie",
            {"with_genres": genre_id, "page": page, "sort_by": "popularity.desc"},
        )
        return self._format_page(data)

    async def discover_movies(self, filters: MovieFilters) -> MoviePage:
        return self._format_page(await self._get("/discover/movie", build_discover_params(filters)))

    async def get_similar_movies(self, movie_id: int, page: int = 1) -> MoviePage:
        data = await self._get(
            f"/movie/{movie_id}/similar",
            {"page": page},
            not_found=f"영화를 찾을 수 없습니다 (ID: {movie_id})",
        )
        return self._format_page(data)

    async def get_movie_recommendations(self, movie_id: int, page: int = 1) -> MoviePage:
        data = await self._get(
            f"/movie/{movie_id}/recommendations",
            {"page": page},
            not_found=f"영화를 찾을 수 없습니다 (ID: {movie_id})",
        )
        return self._format_page(data)

    async def get_personalized_movies(self, preferred_genres: List[str], page: int = 1) -> MoviePage:
        """선호 장르 중 하나를 무작위로 골라 추천 (없으면 인기 영화)"""
        if not preferred_genres:
            return await self.get_popular_movies(page)

        data = await self._get(
            "/discover/movie",
            {"with_genres": random.choice(preferred_genres), "page": page, "sort_by": "popularity.desc"},
        )
        return self._format_page(data)

    async def get_genres(self) -> List[Genre]:
        """TMDB 영화 장르 목록"""
        data = await self._get("/genre/movie/list")
        return [Genre(id=g["id"], name=g.get("name", "")) for g in data.get("genres", [])]
