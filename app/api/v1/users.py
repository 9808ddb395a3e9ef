# app/api/v1/users.py

from fastapi import APIRouter, Depends, Path
from app.models.user import UserModel
from app.schemas.common import ApiResponse
from app.schemas.user import UserProfileUpdate, FavoriteMovieCreate, WatchedMovieCreate
from app.services.user_service import UserService
from app.core.dependencies import get_current_user, get_verified_user, get_user_service

router = APIRouter()


@router.get(
    "/profile",
    response_model=ApiResponse,
    summary="내 프로필 조회",
    description="즐겨찾기, 시청 기록, 통계를 포함한 프로필을 조회합니다.",
)
async def get_profile(
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    profile = await user_service.get_profile(current_user)
    return ApiResponse(data={"user": profile})


@router.put(
    "/profile",
    response_model=ApiResponse,
    summary="내 프로필 수정",
)
async def update_profile(
    update_data: UserProfileUpdate,
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    profile = await user_service.update_profile(current_user, update_data)
    return ApiResponse(message="프로필이 수정되었습니다", data={"user": profile})


@router.get(
    "/profile/minimal",
    response_model=ApiResponse,
    summary="간단 프로필 조회",
    description="헤더 등에 표시할 최소한의 사용자 정보만 조회합니다.",
)
async def get_minimal_profile(
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return ApiResponse(data={"user": await user_service.get_minimal_profile(current_user)})


@router.delete(
    "/avatar",
    response_model=ApiResponse,
    summary="아바타 삭제",
)
async def remove_avatar(
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.remove_avatar(current_user)
    return ApiResponse(message="아바타가 삭제되었습니다", data={"user": user})


# 즐겨찾기
@router.get("/favorites", response_model=ApiResponse, summary="즐겨찾기 목록")
async def get_favorites(
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return ApiResponse(data={"favorites": await user_service.list_favorites(current_user)})


@router.post(
    "/favorites",
    response_model=ApiResponse,
    summary="즐겨찾기 추가",
    description="이메일 인증을 마친 사용자만 사용할 수 있습니다.",
)
async def add_favorite(
    movie: FavoriteMovieCreate,
    current_user: UserModel = Depends(get_verified_user),
    user_service: UserService = Depends(get_user_service),
):
    favorites = await user_service.add_favorite(current_user, movie)
    return ApiResponse(message="즐겨찾기에 추가되었습니다", data={"favorites": favorites})


@router.delete("/favorites/{movie_id}", response_model=ApiResponse, summary="즐겨찾기 삭제")
async def remove_favorite(
    movie_id: int = Path(description="TMDB 영화 ID"),
    current_user: UserModel = Depends(get_verified_user),
    user_service: UserService = Depends(get_user_service),
):
    favorites = await user_service.remove_favorite(current_user, movie_id)
    return ApiResponse(message="즐겨찾기에서 삭제되었습니다", data={"favorites": favorites})


# 시청 기록
@router.get("/watched", response_model=ApiResponse, summary="시청 기록 목록")
async def get_watched(
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return ApiResponse(data={"watched_movies": await user_service.list_watched(current_user)})


@router.post(
    "/watched",
    response_model=ApiResponse,
    summary="시청 기록 추가",
    description="이미 기록된 영화면 평점과 시청일시를 갱신합니다.",
)
async def add_watched(
    movie: WatchedMovieCreate,
    current_user: UserModel = Depends(get_verified_user),
    user_service: UserService = Depends(get_user_service),
):
    watched = await user_service.add_watched(current_user, movie)
    return ApiResponse(message="시청 기록에 추가되었습니다", data={"watched_movies": watched})


@router.delete("/watched/{movie_id}", response_model=ApiResponse, summary="시청 기록 삭제")
async def remove_watched(
    movie_id: int = Path(description="TMDB 영화 ID"),
    current_user: UserModel = Depends(get_verified_user),
    user_service: UserService = Depends(get_user_service),
):
    watched = await user_service.remove_watched(current_user, movie_id)
    return ApiResponse(message="시청 기록에서 삭제되었습니다", data={"watched_movies": watched})
