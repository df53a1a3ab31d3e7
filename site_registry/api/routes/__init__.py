"""
API route definitions.
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .sites import router as sites_router

# Mounted under settings.api_prefix
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(sites_router)

__all__ = ['api_router']
