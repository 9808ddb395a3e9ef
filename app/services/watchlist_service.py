# app/services/watchlist_service.py

import logging
from typing import List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, or_, desc
from sqlalchemy.exc import IntegrityError
from app.models.watchlist import WatchlistModel, WatchlistMovieModel
from app.schemas.common import Pagination
from app.schemas.watchlist import (
    Watchlist,
    WatchlistCreate,
    WatchlistUpdate,
    WatchlistMovie,
    WatchlistMovieCreate,
    WatchlistPage,
)
from app.core.exceptions import (
    NotFoundOrForbiddenError,
    DuplicateEntryError,
    EntryNotFoundError,
    ValidationFailureError,
)

logger = logging.getLogger(__name__)

MAX_WATCHLIST_MOVIES = 1000


class WatchlistService:

    def __init__(self, db: Session):
        self.db = db

    def _to_schema(self, watchlist_model: WatchlistModel) -> Watchlist:
        movies = [WatchlistMovie.model_validate(m) for m in watchlist_model.movies]
        return Watchlist(
            watchlist_id=watchlist_model.watchlist_id,
            user_id=watchlist_model.user_id,
            owner_username=watchlist_model.owner.username if watchlist_model.owner else None,
            name=watchlist_model.name,
            description=watchlist_model.description or "",
            is_public=watchlist_model.is_public,
            movies=movies,
            movie_count=len(movies),
            created_at=watchlist_model.created_at,
            updated_at=watchlist_model.updated_at,
        )

    def _get_owned(self, watchlist_id: int, user_id: int) -> WatchlistModel:
        """소유자 확인 (없는 경우와 남의 것인 경우 같은 에러)"""
        stmt = select(WatchlistModel).where(
            WatchlistModel.watchlist_id == watchlist_id,
            WatchlistModel.user_id == user_id,
        )
        watchlist_model = self.db.execute(stmt).scalar_one_or_none()
        if not watchlist_model:
            raise NotFoundOrForbiddenError("왓치리스트를 찾을 수 없거나 수정 권한이 없습니다")
        return watchlist_model

    async def create_watchlist(self, user_id: int, data: WatchlistCreate) -> Watchlist:
        watchlist_model = WatchlistModel(
            user_id=user_id,
            name=data.name,
            description=data.description,
            is_public=data.is_public,
        )
        self.db.add(watchlist_model)
        self.db.commit()
        self.db.refresh(watchlist_model)
        logger.info("왓치리스트 생성: id=%s user_id=%s", watchlist_model.watchlist_id, user_id)

        return self._to_schema(watchlist_model)

    async def get_user_watchlists(self, user_id: int) -> List[Watchlist]:
        stmt = (
            select(WatchlistModel)
            .options(selectinload(WatchlistModel.movies))
            .where(WatchlistModel.user_id == user_id)
            .order_by(desc(WatchlistModel.created_at), desc(WatchlistModel.watchlist_id))
        )
        return [self._to_schema(w) for w in self.db.execute(stmt).scalars().all()]

    async def get_watchlist(self, watchlist_id: int, user_id: int) -> Watchlist:
        """본인 또는 공개 왓치리스트 조회"""
        stmt = select(WatchlistModel).where(
            WatchlistModel.watchlist_id == watchlist_id,
            or_(WatchlistModel.user_id == user_id, WatchlistModel.is_public == True),
        )
        watchlist_model = self.db.execute(stmt).scalar_one_or_none()
        if not watchlist_model:
            raise NotFoundOrForbiddenError("왓치리스트를 찾을 수 없거나 접근 권한이 없습니다")
        return self._to_schema(watchlist_model)

    async def update_watchlist(self, watchlist_id: int, user_id: int, data: WatchlistUpdate) -> Watchlist:
        watchlist_model = self._get_owned(watchlist_id, user_id)

        watchlist_model.name = data.name
        watchlist_model.description = data.description
        watchlist_model.is_public = data.is_public

        self.db.commit()
        self.db.refresh(watchlist_model)
        return self._to_schema(watchlist_model)

    async def delete_watchlist(self, watchlist_id: int, user_id: int) -> bool:
        watchlist_model = self._get_owned(watchlist_id, user_id)
        self.db.delete(watchlist_model)
        self.db.commit()
        logger.info("왓치리스트 삭제: id=%s", watchlist_id)
        return True

    async def add_movie(self, watchlist_id: int, user_id: int, movie: WatchlistMovieCreate) -> Watchlist:
        watchlist_model = self._get_owned(watchlist_id, user_id)

        # 같은 왓치리스트 안에서 영화 중복 불가
        if any(m.movie_id == movie.movie_id for m in watchlist_model.movies):
            raise DuplicateEntryError("이미 왓치리스트에 있는 영화입니다")

        if len(watchlist_model.movies) >= MAX_WATCHLIST_MOVIES:
            raise ValidationFailureError(
                f"왓치리스트에는 최대 {MAX_WATCHLIST_MOVIES}편까지 추가할 수 있습니다"
            )

        watchlist_model.movies.append(
            WatchlistMovieModel(movie_id=movie.movie_id, title=movie.title, poster=movie.poster)
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEntryError("이미 왓치리스트에 있는 영화입니다")
        self.db.refresh(watchlist_model)

        return self._to_schema(watchlist_model)

    async def remove_movie(self, watchlist_id: int, user_id: int, movie_id: int) -> Watchlist:
        watchlist_model = self._get_owned(watchlist_id, user_id)

        target = next((m for m in watchlist_model.movies if m.movie_id == movie_id), None)
        if not target:
            raise EntryNotFoundError("왓치리스트에서 영화를 찾을 수 없습니다")

        watchlist_model.movies.remove(target)
        self.db.commit()
        self.db.refresh(watchlist_model)

        return self._to_schema(watchlist_model)

    async def get_public_watchlists(self, page: int = 1, limit: int = 10) -> WatchlistPage:
        total = self.db.execute(
            select(func.count(WatchlistModel.watchlist_id)).where(WatchlistModel.is_public == True)
        ).scalar() or 0

        stmt = (
            select(WatchlistModel)
            .options(selectinload(WatchlistModel.movies), selectinload(WatchlistModel.owner))
            .where(WatchlistModel.is_public == True)
            .order_by(desc(WatchlistModel.created_at), desc(WatchlistModel.watchlist_id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        watchlists = [self._to_schema(w) for w in self.db.execute(stmt).scalars().all()]

        return WatchlistPage(
            watchlists=watchlists,
            pagination=Pagination.build(page, limit, total),
        )
