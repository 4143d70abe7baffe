"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import review, guidelines

api_router = APIRouter()

api_router.include_router(review.router, prefix="/review", tags=["Code Review"])
api_router.include_router(guidelines.router, prefix="/guidelines", tags=["Guidelines"])
