from fastapi import APIRouter

from app.api.routes import ai_ocr, conflicts, health, ocr

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(conflicts.router, prefix="/conflicts", tags=["Conflicts"])
api_router.include_router(ocr.router, prefix="/ocr", tags=["OCR Insights"])
api_router.include_router(ai_ocr.router, prefix="/ai/ocr", tags=["OCR Insights"])
