"""API router aggregator."""

from fastapi import APIRouter

from blogapp.api.v1.endpoints import auth, comments, connection, likes, posts

api_router = APIRouter(prefix="/api")

api_router.include_router(posts.router)
api_router.include_router(comments.router)
api_router.include_router(likes.router)
api_router.include_router(auth.router)
api_router.include_router(connection.router)

__all__ = ["api_router"]
