from fastapi import APIRouter

from src.api.ot import router as ot_router

api_router = APIRouter(prefix="/api")

api_router.include_router(ot_router)
