# app/api/v1/__init__.py

from fastapi import APIRouter
from . import auth, users, watchlists, reviews, movies, system

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["인증"])
api_router.include_router(users.router, prefix="/users", tags=["사용자"])
api_router.include_router(watchlists.router, prefix="/watchlists", tags=["왓치리스트"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["리뷰"])
api_router.include_router(movies.router, prefix="/movies", tags=["영화"])
api_router.include_router(system.router, prefix="/system", tags=["시스템"])
