# app/api/v1/watchlists.py

from fastapi import APIRouter, Depends, Path, Query, status
from app.models.user import UserModel
from app.schemas.common import ApiResponse
from app.schemas.watchlist import WatchlistCreate, WatchlistUpdate, WatchlistMovieCreate
from app.services.watchlist_service import WatchlistService
from app.core.dependencies import get_current_user, get_watchlist_service

router = APIRouter()


@router.post(
    "/",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="왓치리스트 생성",
)
async def create_watchlist(
    data: WatchlistCreate,
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlist = await watchlist_service.create_watchlist(current_user.user_id, data)
    return ApiResponse(message="왓치리스트가 생성되었습니다", data={"watchlist": watchlist})


@router.get("/", response_model=ApiResponse, summary="내 왓치리스트 목록")
async def get_my_watchlists(
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlists = await watchlist_service.get_user_watchlists(current_user.user_id)
    return ApiResponse(data={"watchlists": watchlists})


# /{watchlist_id} 보다 먼저 선언
@router.get(
    "/public/all",
    response_model=ApiResponse,
    summary="공개 왓치리스트 목록",
    description="로그인 없이 조회할 수 있습니다.",
)
async def get_public_watchlists(
    page: int = Query(default=1, ge=1, description="페이지"),
    limit: int = Query(default=10, ge=1, le=100, description="페이지 크기"),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return ApiResponse(data=await watchlist_service.get_public_watchlists(page, limit))


@router.get(
    "/{watchlist_id}",
    response_model=ApiResponse,
    summary="왓치리스트 조회",
    description="본인 왓치리스트 또는 공개 왓치리스트만 조회할 수 있습니다.",
)
async def get_watchlist(
    watchlist_id: int = Path(description="왓치리스트 ID"),
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlist = await watchlist_service.get_watchlist(watchlist_id, current_user.user_id)
    return ApiResponse(data={"watchlist": watchlist})


@router.put("/{watchlist_id}", response_model=ApiResponse, summary="왓치리스트 수정")
async def update_watchlist(
    data: WatchlistUpdate,
    watchlist_id: int = Path(description="왓치리스트 ID"),
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlist = await watchlist_service.update_watchlist(watchlist_id, current_user.user_id, data)
    return ApiResponse(message="왓치리스트가 수정되었습니다", data={"watchlist": watchlist})


@router.delete("/{watchlist_id}", response_model=ApiResponse, summary="왓치리스트 삭제")
async def delete_watchlist(
    watchlist_id: int = Path(description="왓치리스트 ID"),
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    await watchlist_service.delete_watchlist(watchlist_id, current_user.user_id)
    return ApiResponse(message="왓치리스트가 삭제되었습니다")


@router.post("/{watchlist_id}/movies", response_model=ApiResponse, summary="왓치리스트에 영화 추가")
async def add_movie_to_watchlist(
    movie: WatchlistMovieCreate,
    watchlist_id: int = Path(description="왓치리스트 ID"),
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlist = await watchlist_service.add_movie(watchlist_id, current_user.user_id, movie)
    return ApiResponse(message="왓치리스트에 영화가 추가되었습니다", data={"watchlist": watchlist})


@router.delete(
    "/{watchlist_id}/movies/{movie_id}",
    response_model=ApiResponse,
    summary="왓치리스트에서 영화 삭제",
)
async def remove_movie_from_watchlist(
    watchlist_id: int = Path(description="왓치리스트 ID"),
    movie_id: int = Path(description="TMDB 영화 ID"),
    current_user: UserModel = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    watchlist = await watchlist_service.remove_movie(watchlist_id, current_user.user_id, movie_id)
    return ApiResponse(message="왓치리스트에서 영화가 삭제되었습니다", data={"watchlist": watchlist})
