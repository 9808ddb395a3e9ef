# app/api/v1/reviews.py

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, Response, status
from app.models.user import UserModel
from app.schemas.common import ApiResponse
from app.schemas.review import ReviewCreate, ReviewReportCreate
from app.services.review_service import ReviewService
from app.core.dependencies import (
    get_current_user,
    get_optional_current_user,
    get_verified_user,
    get_review_service,
)

router = APIRouter()


@router.post(
    "/",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="리뷰 작성",
    description="영화당 하나의 리뷰만 남길 수 있으며, 이미 작성한 리뷰가 있으면 수정됩니다.",
)
async def create_or_update_review(
    data: ReviewCreate,
    response: Response,
    current_user: UserModel = Depends(get_verified_user),
    review_service: ReviewService = Depends(get_review_service),
):
    review, created = await review_service.upsert_review(current_user.user_id, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ApiResponse(
        message="리뷰가 작성되었습니다" if created else "리뷰가 수정되었습니다",
        data={"review": review},
    )


@router.get("/movie/{movie_id}", response_model=ApiResponse, summary="영화 리뷰 목록")
async def get_movie_reviews(
    movie_id: int = Path(description="TMDB 영화 ID"),
    page: int = Query(default=1, ge=1, description="페이지"),
    limit: int = Query(default=10, ge=1, le=50, description="페이지 크기"),
    current_user: Optional[UserModel] = Depends(get_optional_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    reviews = await review_service.get_movie_reviews(
        movie_id, page, limit, current_user.user_id if current_user else None
    )
    return ApiResponse(data=reviews)


@router.get("/movie/{movie_id}/stats", response_model=ApiResponse, summary="영화 리뷰 통계")
async def get_movie_review_stats(
    movie_id: int = Path(description="TMDB 영화 ID"),
    review_service: ReviewService = Depends(get_review_service),
):
    return ApiResponse(data=await review_service.get_movie_stats(movie_id))


@router.get("/user/me", response_model=ApiResponse, summary="내 리뷰 목록")
async def get_my_reviews(
    page: int = Query(default=1, ge=1, description="페이지"),
    limit: int = Query(default=10, ge=1, le=50, description="페이지 크기"),
    current_user: UserModel = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    return ApiResponse(data=await review_service.get_user_reviews(current_user.user_id, page, limit))


@router.get(
    "/user/movie/{movie_id}",
    response_model=ApiResponse,
    summary="특정 영화에 대한 내 리뷰",
    description="작성한 리뷰가 없으면 review 가 null 입니다.",
)
async def get_my_review_for_movie(
    movie_id: int = Path(description="TMDB 영화 ID"),
    current_user: UserModel = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    review = await review_service.get_user_review_for_movie(current_user.user_id, movie_id)
    return ApiResponse(data={"review": review})


@router.get("/{review_id}", response_model=ApiResponse, summary="리뷰 조회")
async def get_review(
    review_id: int = Path(description="리뷰 ID"),
    current_user: Optional[UserModel] = Depends(get_optional_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    review = await review_service.get_review(review_id, current_user.user_id if current_user else None)
    return ApiResponse(data={"review": review})


@router.delete("/{review_id}", response_model=ApiResponse, summary="리뷰 삭제")
async def delete_review(
    review_id: int = Path(description="리뷰 ID"),
    current_user: UserModel = Depends(get_verified_user),
    review_service: ReviewService = Depends(get_review_service),
):
    await review_service.delete_review(review_id, current_user.user_id)
    return ApiResponse(message="리뷰가 삭제되었습니다")


@router.post("/{review_id}/like", response_model=ApiResponse, summary="리뷰 좋아요 토글")
async def toggle_review_like(
    review_id: int = Path(description="리뷰 ID"),
    current_user: UserModel = Depends(get_verified_user),
    review_service: ReviewService = Depends(get_review_service),
):
    result = await review_service.toggle_like(review_id, current_user.user_id)
    return ApiResponse(
        message="리뷰에 좋아요를 눌렀습니다" if result.liked else "리뷰 좋아요를 취소했습니다",
        data=result,
    )


@router.post("/{review_id}/report", response_model=ApiResponse, summary="리뷰 신고")
async def report_review(
    report: ReviewReportCreate,
    review_id: int = Path(description="리뷰 ID"),
    current_user: UserModel = Depends(get_verified_user),
    review_service: ReviewService = Depends(get_review_service),
):
    await review_service.report_review(review_id, current_user.user_id, report.reason)
    return ApiResponse(message="신고가 접수되었습니다")
