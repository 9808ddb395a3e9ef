# app/services/user_service.py

import logging
from datetime import datetime
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from app.models.user import UserModel
from app.models.favorite_movie import FavoriteMovieModel
from app.models.watched_movie import WatchedMovieModel
from app.schemas.user import (
    User,
    UserProfile,
    UserMinimal,
    UserStats,
    UserProfileUpdate,
    FavoriteMovie,
    FavoriteMovieCreate,
    WatchedMovie,
    WatchedMovieCreate,
)
from app.core.exceptions import DuplicateAccountError, DuplicateEntryError, EntryNotFoundError

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db

    # 사용자 상세 정보
    async def get_profile(self, user_model: UserModel) -> UserProfile:
        """프로필 조회 (즐겨찾기, 시청 기록, 통계 포함)"""
        user = User.from_model(user_model)
        favorites = [FavoriteMovie.model_validate(m) for m in user_model.favorite_movies]
        watched = [WatchedMovie.model_validate(m) for m in user_model.watched_movies]

        return UserProfile(
            **user.model_dump(),
            favorite_movies=favorites,
            watched_movies=watched,
            stats=self._get_stats(favorites, watched),
        )

    async def get_minimal_profile(self, user_model: UserModel) -> UserMinimal:
        return UserMinimal(
            user_id=user_model.user_id,
            username=user_model.username,
            avatar_url=user_model.avatar_url,
            is_email_verified=user_model.is_email_verified,
            theme=user_model.theme or "light",
        )

    def _get_stats(self, favorites: List[FavoriteMovie], watched: List[WatchedMovie]) -> UserStats:
        ratings = [m.rating for m in watched if m.rating is not None]
        average = round(sum(ratings) / len(ratings), 1) if ratings else 0.0
        return UserStats(
            total_favorites=len(favorites),
            total_watched=len(watched),
            average_rating=average,
        )

    async def update_profile(self, user_model: UserModel, update_data: UserProfileUpdate) -> UserProfile:
        """사용자 프로필 업데이트"""
        if update_data.username and update_data.username != user_model.username:
            stmt = select(UserModel.user_id).where(
                UserModel.username == update_data.username,
                UserModel.user_id != user_model.user_id,
            )
            if self.db.execute(stmt).first():
                raise DuplicateAccountError("이미 사용 중인 사용자 이름입니다")
            user_model.username = update_data.username

        if update_data.email and update_data.email != user_model.email:
            stmt = select(UserModel.user_id).where(
                UserModel.email == update_data.email,
                UserModel.user_id != user_model.user_id,
            )
            if self.db.execute(stmt).first():
                raise DuplicateAccountError("이미 사용 중인 이메일입니다")
            user_model.email = update_data.email
            # 새 주소는 다시 인증해야 함
            user_model.is_email_verified = False
            user_model.email_verification_token = None
            user_model.email_verification_expires = None

        if update_data.bio is not None:
            user_model.bio = update_data.bio.strip()
        if update_data.avatar_url is not None:
            user_model.avatar_url = update_data.avatar_url
        if update_data.theme is not None:
            user_model.theme = update_data.theme
        if update_data.genres is not None:
            # JSON 컬럼은 새 리스트를 할당해야 변경이 감지됨
            user_model.preferred_genres = list(dict.fromkeys(update_data.genres))

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateAccountError()
        self.db.refresh(user_model)

        return await self.get_profile(user_model)

    async def remove_avatar(self, user_model: UserModel) -> User:
        user_model.avatar_url = None
        self.db.commit()
        self.db.refresh(user_model)
        return User.from_model(user_model)

    # 즐겨찾기
    async def list_favorites(self, user_model: UserModel) -> List[FavoriteMovie]:
        return [FavoriteMovie.model_validate(m) for m in user_model.favorite_movies]

    async def add_favorite(self, user_model: UserModel, movie: FavoriteMovieCreate) -> List[FavoriteMovie]:
        if any(m.movie_id == movie.movie_id for m in user_model.favorite_movies):
            raise DuplicateEntryError("이미 즐겨찾기에 있는 영화입니다")

        user_model.favorite_movies.append(
            FavoriteMovieModel(movie_id=movie.movie_id, title=movie.title.strip(), poster=movie.poster)
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEntryError("이미 즐겨찾기에 있는 영화입니다")
        self.db.refresh(user_model)

        return await self.list_favorites(user_model)

    async def remove_favorite(self, user_model: UserModel, movie_id: int) -> List[FavoriteMovie]:
        target = next((m for m in user_model.favorite_movies if m.movie_id == movie_id), None)
        if not target:
            raise EntryNotFoundError("즐겨찾기에서 영화를 찾을 수 없습니다")

        user_model.favorite_movies.remove(target)
        self.db.commit()
        self.db.refresh(user_model)

        return await self.list_favorites(user_model)

    # 시청 기록
    async def list_watched(self, user_model: UserModel) -> List[WatchedMovie]:
        return [WatchedMovie.model_validate(m) for m in user_model.watched_movies]

    async def add_watched(self, user_model: UserModel, movie: WatchedMovieCreate) -> List[WatchedMovie]:
        """시청 기록 추가 (이미 있으면 평점과 시청일시 갱신)"""
        existing = next((m for m in user_model.watched_movies if m.movie_id == movie.movie_id), None)

        if existing:
            existing.title = movie.title.strip()
            existing.poster = movie.poster
            existing.rating = movie.rating
            existing.watched_at = datetime.utcnow()
        else:
            user_model.watched_movies.append(
                WatchedMovieModel(
                    movie_id=movie.movie_id,
                    title=movie.title.strip(),
                    poster=movie.poster,
                    rating=movie.rating,
                    watched_at=datetime.utcnow(),
                )
            )

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEntryError("이미 시청 기록에 있는 영화입니다")
        self.db.refresh(user_model)

        return await self.list_watched(user_model)

    async def remove_watched(self, user_model: UserModel, movie_id: int) -> List[WatchedMovie]:
        target = next((m for m in user_model.watched_movies if m.movie_id == movie_id), None)
        if not target:
            raise EntryNotFoundError("시청 기록에서 영화를 찾을 수 없습니다")

        user_model.watched_movies.remove(target)
        self.db.commit()
        self.db.refresh(user_model)

        return await self.list_watched(user_model)
