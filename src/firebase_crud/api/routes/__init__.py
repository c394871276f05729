from fastapi import APIRouter

from firebase_crud.api.routes.documents import router as documents_router
from firebase_crud.api.routes.healthz import router as healthz_router

api_router = APIRouter()
api_router.include_router(healthz_router)
api_router.include_router(documents_router)
