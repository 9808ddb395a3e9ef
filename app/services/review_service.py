# app/services/review_service.py

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError
from app.models.review import ReviewModel, ReviewLikeModel, ReviewReportModel
from app.schemas.common import Pagination
from app.schemas.review import (
    Review,
    ReviewCreate,
    ReviewLikeResult,
    MovieReviewPage,
    ReviewPage,
    ReviewStats,
)
from app.core.exceptions import (
    NotFoundOrForbiddenError,
    EntryNotFoundError,
    AlreadyReportedError,
)

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db: Session):
        self.db = db

    def _likes_count(self, review_id: int) -> int:
        stmt = select(func.count(ReviewLikeModel.user_id)).where(ReviewLikeModel.review_id == review_id)
        return self.db.execute(stmt).scalar() or 0

    def _build_reviews(self, review_models: List[ReviewModel], current_user_id: Optional[int]) -> List[Review]:
        """좋아요/신고 수를 한 번에 집계해서 응답 생성"""
        if not review_models:
            return []

        review_ids = [r.review_id for r in review_models]

        likes_stmt = (
            select(ReviewLikeModel.review_id, func.count(ReviewLikeModel.user_id))
            .where(ReviewLikeModel.review_id.in_(review_ids))
            .group_by(ReviewLikeModel.review_id)
        )
        likes_data: Dict[int, int] = dict(self.db.execute(likes_stmt).all())

        reports_stmt = (
            select(ReviewReportModel.review_id, func.count(ReviewReportModel.report_id))
            .where(ReviewReportModel.review_id.in_(review_ids))
            .group_by(ReviewReportModel.review_id)
        )
        reports_data: Dict[int, int] = dict(self.db.execute(reports_stmt).all())

        liked_ids = set()
        if current_user_id:
            liked_stmt = select(ReviewLikeModel.review_id).where(
                ReviewLikeModel.review_id.in_(review_ids),
                ReviewLikeModel.user_id == current_user_id,
            )
            liked_ids = set(self.db.execute(liked_stmt).scalars().all())

        return [
            Review(
                review_id=r.review_id,
                user_id=r.user_id,
                movie_id=r.movie_id,
                movie_title=r.movie_title,
                rating=r.rating,
                content=r.content,
                is_spoiler=r.is_spoiler,
                likes_count=likes_data.get(r.review_id, 0),
                is_liked=r.review_id in liked_ids,
                reports_count=reports_data.get(r.review_id, 0),
                created_at=r.created_at,
                updated_at=r.updated_at,
                user_name=r.author.username if r.author else None,
                user_avatar=r.author.avatar_url if r.author else None,
            )
            for r in review_models
        ]

    def _get_model(self, review_id: int) -> ReviewModel:
        review_model = self.db.get(ReviewModel, review_id)
        if not review_model:
            raise EntryNotFoundError("리뷰를 찾을 수 없습니다")
        return review_model

    def _find(self, user_id: int, movie_id: int) -> Optional[ReviewModel]:
        stmt = select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.movie_id == movie_id)
        return self.db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _apply(review_model: ReviewModel, data: ReviewCreate) -> None:
        review_model.movie_title = data.title.strip()
        review_model.rating = data.rating
        review_model.content = data.content
        review_model.is_spoiler = data.is_spoiler
        review_model.updated_at = datetime.utcnow()

    async def upsert_review(self, user_id: int, data: ReviewCreate) -> Tuple[Review, bool]:
        """리뷰 작성 (영화당 1개, 이미 있으면 수정)

        Returns:
            (리뷰, 새로 생성되었는지 여부)
        """
        review_model = self._find(user_id, data.movie_id)
        created = review_model is None

        if created:
            review_model = ReviewModel(user_id=user_id, movie_id=data.movie_id)
            self._apply(review_model, data)
            self.db.add(review_model)
        else:
            self._apply(review_model, data)

        try:
            self.db.commit()
        except IntegrityError:
            # 동시에 같은 영화 리뷰가 생성된 경우 기존 리뷰를 수정
            self.db.rollback()
            review_model = self._find(user_id, data.movie_id)
            if not review_model:
                raise
            self._apply(review_model, data)
            self.db.commit()
            created = False

        self.db.refresh(review_model)
        logger.info(
            "리뷰 %s: review_id=%s movie_id=%s",
            "작성" if created else "수정",
            review_model.review_id,
            review_model.movie_id,
        )

        return self._build_reviews([review_model], user_id)[0], created

    async def get_review(self, review_id: int, current_user_id: Optional[int] = None) -> Review:
        review_model = self._get_model(review_id)
        return self._build_reviews([review_model], current_user_id)[0]

    async def delete_review(self, review_id: int, user_id: int) -> bool:
        stmt = select(ReviewModel).where(ReviewModel.review_id == review_id, ReviewModel.user_id == user_id)
        review_model = self.db.execute(stmt).scalar_one_or_none()
        if not review_model:
            raise NotFoundOrForbiddenError("리뷰를 찾을 수 없거나 삭제 권한이 없습니다")

        self.db.delete(review_model)
        self.db.commit()
        logger.info("리뷰 삭제: review_id=%s", review_id)
        return True

    async def get_movie_reviews(
        self,
        movie_id: int,
        page: int = 1,
        limit: int = 10,
        current_user_id: Optional[int] = None,
    ) -> MovieReviewPage:
        total, average = self.db.execute(
            select(func.count(ReviewModel.review_id), func.avg(ReviewModel.rating)).where(
                ReviewModel.movie_id == movie_id
            )
        ).one()
        total = total or 0

        stmt = (
            select(ReviewModel)
            .where(ReviewModel.movie_id == movie_id)
            .order_by(desc(ReviewModel.created_at), desc(ReviewModel.review_id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        review_models = self.db.execute(stmt).scalars().all()

        return MovieReviewPage(
            reviews=self._build_reviews(review_models, current_user_id),
            average_rating=round(float(average), 1) if average is not None else 0.0,
            total_reviews=total,
            pagination=Pagination.build(page, limit, total),
        )

    async def get_movie_stats(self, movie_id: int) -> ReviewStats:
        rows = self.db.execute(
            select(ReviewModel.rating, func.count(ReviewModel.review_id))
            .where(ReviewModel.movie_id == movie_id)
            .group_by(ReviewModel.rating)
        ).all()
        spoiler_count = self.db.execute(
            select(func.count(ReviewModel.review_id)).where(
                ReviewModel.movie_id == movie_id, ReviewModel.is_spoiler == True
            )
        ).scalar() or 0

        distribution = {rating: 0 for rating in range(1, 11)}
        for rating, count in rows:
            distribution[rating] = count

        total = sum(distribution.values())
        average = sum(r * c for r, c in distribution.items()) / total if total else 0.0

        return ReviewStats(
            movie_id=movie_id,
            total_reviews=total,
            average_rating=round(average, 1),
            spoiler_count=spoiler_count,
            distribution=distribution,
        )

    async def get_user_reviews(self, user_id: int, page: int = 1, limit: int = 10) -> ReviewPage:
        total = self.db.execute(
            select(func.count(ReviewModel.review_id)).where(ReviewModel.user_id == user_id)
        ).scalar() or 0

        stmt = (
            select(ReviewModel)
            .where(ReviewModel.user_id == user_id)
            .order_by(desc(ReviewModel.created_at), desc(ReviewModel.review_id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        review_models = self.db.execute(stmt).scalars().all()

        return ReviewPage(
            reviews=self._build_reviews(review_models, user_id),
            pagination=Pagination.build(page, limit, total),
        )

    async def get_user_review_for_movie(self, user_id: int, movie_id: int) -> Optional[Review]:
        review_model = self._find(user_id, movie_id)
        if not review_model:
            return None
        return self._build_reviews([review_model], user_id)[0]

    async def toggle_like(self, review_id: int, user_id: int) -> ReviewLikeResult:
        self._get_model(review_id)

        like = self.db.get(ReviewLikeModel, (user_id, review_id))
        if like:
            self.db.delete(like)
            liked = False
        else:
            self.db.add(ReviewLikeModel(user_id=user_id, review_id=review_id))
            liked = True

        try:
            self.db.commit()
        except IntegrityError:
            # 동시에 좋아요를 누른 경우 이미 좋아요 상태
            self.db.rollback()
            liked = True

        return ReviewLikeResult(
            review_id=review_id,
            liked=liked,
            likes_count=self._likes_count(review_id),
        )

    async def report_review(self, review_id: int, user_id: int, reason: str) -> None:
        self._get_model(review_id)

        stmt = select(ReviewReportModel.report_id).where(
            ReviewReportModel.review_id == review_id,
            ReviewReportModel.user_id == user_id,
        )
        if self.db.execute(stmt).first():
            raise AlreadyReportedError()

        self.db.add(ReviewReportModel(review_id=review_id, user_id=user_id, reason=reason.strip()))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise AlreadyReportedError()
        logger.info("리뷰 신고 접수: review_id=%s", review_id)
