from fastapi import APIRouter
from . import auth, media

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(media.router, tags=["media"])
