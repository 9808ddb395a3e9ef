"""Tests for the TMDB client using httpx.MockTransport."""

from datetime import date

import httpx
import pytest

from app.core.exceptions import CatalogError, EntryNotFoundError, ValidationFailureError
from app.schemas.movie import MovieFilters
from app.services.tmdb_service import TMDBService, build_discover_params

MOVIE_DETAILS = {
    "id": 550,
    "title": "파이트 클럽",
    "original_title": "Fight Club",
    "overview": "...",
    "poster_path": "/poster.jpg",
    "backdrop_path": "/backdrop.jpg",
    "release_date": "1999-10-15",
    "vote_average": 8.4,
    "vote_count": 26000,
    "runtime": 139,
    "genres": [{"id": 18, "name": "드라마"}],
    "credits": {
        "cast": [
            {"id": i, "name": f"배우 {i}", "character": f"배역 {i}", "profile_path": None, "order": i}
            for i in range(20)
        ],
        "crew": [
            {"id": 100, "name": "Art Linson", "job": "Producer", "department": "Production"},
            {"id": 101, "name": "Jim Uhls", "job": "Screenplay", "department": "Writing"},
            {"id": 102, "name": "David Fincher", "job": "Director", "department": "Directing",
             "profile_path": "/fincher.jpg"},
        ],
    },
    "videos": {
        "results": [
            {"id": "v1", "key": "teaser-key", "name": "Teaser", "site": "YouTube", "type": "Teaser"},
            {"id": "v2", "key": "trailer-key", "name": "Trailer", "site": "YouTube", "type": "Trailer"},
            {"id": "v3", "key": "vimeo-key", "name": "Clip", "site": "Vimeo", "type": "Clip"},
        ]
    },
}


def make_service(settings, handler) -> TMDBService:
    return TMDBService(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_movie_details_formats_credits_and_videos(settings):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=MOVIE_DETAILS)

    movie = await make_service(settings, handler).get_movie_details(550)

    assert requests[0].url.path == "/3/movie/550"
    assert requests[0].url.params["append_to_response"] == "credits,videos"
    assert requests[0].url.params["api_key"] == "test-tmdb-key"
    assert requests[0].url.params["language"] == "ko-KR"

    assert movie.title == "파이트 클럽"
    assert movie.release_date == date(1999, 10, 15)
    assert movie.poster == "https://image.tmdb.org/t/p/w500/poster.jpg"
    assert movie.backdrop == "https://image.tmdb.org/t/p/w1280/backdrop.jpg"
    assert len(movie.cast) == 15
    assert movie.director == "David Fincher"
    assert movie.producer == "Art Linson"
    assert movie.writer == "Jim Uhls"
    assert movie.crew[2].profile_path == "https://image.tmdb.org/t/p/w200/fincher.jpg"
    assert movie.trailer == "https://www.youtube.com/watch?v=trailer-key"
    assert movie.teaser == "https://www.youtube.com/watch?v=teaser-key"
    assert [v.url for v in movie.videos][2] is None


@pytest.mark.asyncio
async def test_movie_details_without_credits(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": 1, "title": "무명", "release_date": ""})

    movie = await make_service(settings, handler).get_movie_details(1)

    assert movie.director == "Unknown"
    assert movie.writer == "Unknown"
    assert movie.trailer is None
    assert movie.release_date is None


@pytest.mark.asyncio
async def test_movie_not_found(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status_message": "not found"})

    with pytest.raises(EntryNotFoundError):
        await make_service(settings, handler).get_movie_details(999999)


@pytest.mark.asyncio
async def test_upstream_failure_raises_catalog_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(CatalogError):
        await make_service(settings, handler).get_popular_movies()


@pytest.mark.asyncio
async def test_transport_error_raises_catalog_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CatalogError):
        await make_service(settings, handler).search_movies("매트릭스")


@pytest.mark.asyncio
async def test_search_results_are_normalized(tmdb, tmdb_requests):
    page = await tmdb.search_movies("파이트", page=2)

    assert tmdb_requests[0].url.path == "/3/search/movie"
    assert tmdb_requests[0].url.params["query"] == "파이트"
    assert tmdb_requests[0].url.params["include_adult"] == "false"
    assert page.page == 2
    assert page.total_results == 1
    assert page.results[0].id == 550
    assert page.results[0].poster == "https://image.tmdb.org/t/p/w500/fight.jpg"
    assert page.results[0].genre_ids == [18]


@pytest.mark.asyncio
async def test_personalized_uses_preferred_genre(tmdb, tmdb_requests):
    await tmdb.get_personalized_movies(["878"])
    assert tmdb_requests[-1].url.path == "/3/discover/movie"
    assert tmdb_requests[-1].url.params["with_genres"] == "878"

    await tmdb.get_personalized_movies([])
    assert tmdb_requests[-1].url.path == "/3/movie/popular"


@pytest.mark.asyncio
async def test_get_genres(tmdb):
    genres = await tmdb.get_genres()
    assert [(g.id, g.name) for g in genres] == [(28, "액션")]


def test_build_discover_params_omits_unset_filters():
    assert build_discover_params(MovieFilters()) == {"page": 1, "sort_by": "popularity.desc"}


def test_build_discover_params_maps_all_filters():
    filters = MovieFilters(
        genres=[28, 12],
        year=2020,
        min_rating=7.5,
        max_rating=9,
        release_date_from=date(2020, 1, 1),
        release_date_to=date(2020, 12, 31),
        min_runtime=90,
        max_runtime=150,
        language="EN",
        min_votes=100,
        sort_by="vote_average.desc",
        page=3,
    )

    assert build_discover_params(filters) == {
        "page": 3,
        "sort_by": "vote_average.desc",
        "with_genres": "28,12",
        "primary_release_year": 2020,
        "vote_average.gte": 7.5,
        "vote_average.lte": 9,
        "primary_release_date.gte": "2020-01-01",
        "primary_release_date.lte": "2020-12-31",
        "with_runtime.gte": 90,
        "with_runtime.lte": 150,
        "with_original_language": "en",
        "vote_count.gte": 100,
    }


def test_build_discover_params_rejects_unknown_sort():
    with pytest.raises(ValidationFailureError):
        build_discover_params(MovieFilters(sort_by="title; drop table"))
