"""OCR insights: document field grouping and cross-document label collisions."""

from app.services.ocr_insights.field_extractor import FieldExtractor, categorize_document
from app.services.ocr_insights.ocr_insights_service import OcrInsightsService
from app.services.ocr_insights.view_builder import build_ocr_view

__all__ = [
    "FieldExtractor",
    "categorize_document",
    "OcrInsightsService",
    "build_ocr_view",
]
