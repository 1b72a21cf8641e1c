"""
Main API router for v1
"""

from fastapi import APIRouter

from lajme.api.v1.endpoints import articles, maintenance, subscriptions

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(articles.router)
api_router.include_router(subscriptions.router)
api_router.include_router(maintenance.router)
