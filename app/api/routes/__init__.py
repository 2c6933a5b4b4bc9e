"""API routes."""

from fastapi import APIRouter

from app.api.routes import analysis, chatkit

api_router = APIRouter()

api_router.include_router(chatkit.router, tags=["chatkit"])
api_router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
