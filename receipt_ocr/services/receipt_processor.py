"""
Receipt pipeline: upload -> (PDF rasterization) -> OCR -> total extraction.

The result pre-fills a budgeting transaction: the extracted amount, a title
derived from the file name, and the "expense" type.
"""

import mimetypes
from pathlib import PurePath
from typing import Optional
from loguru import logger
from .amount_extractor import find_total
from .errors import ReceiptProcessingError, ReceiptTooLarge, UnsupportedReceiptType
from .ocr_engines import OcrEngine, ProgressCallback, get_ocr_engine
from .pdf_render import PDF_CONTENT_TYPE, is_pdf, render_first_page
from .receipt_types import ExtractedReceipt
from ..core.config import settings

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def suggest_title(filename: str | None) -> str:
    """Transaction title suggestion: the file name without its extension."""
    if not filename:
        return ""
    return PurePath(filename).stem


def resolve_source_type(data: bytes, content_type: str | None, filename: str | None) -> str:
    """
    Classify an upload as "pdf" or "image".

    Generic or missing content types are resolved from the file name,
    then from the PDF magic bytes.

    Raises:
        UnsupportedReceiptType: Upload is neither an image nor a PDF
    """
    media_type = (content_type or "").split(";")[0].strip().lower()

    if media_type in GENERIC_CONTENT_TYPES and filename:
        media_type = mimetypes.guess_type(filename)[0] or media_type

    if media_type == PDF_CONTENT_TYPE:
        return "pdf"
    if media_type.startswith("image/"):
        return "image"
    if media_type in GENERIC_CONTENT_TYPES and is_pdf(data, filename=filename):
        return "pdf"

    raise UnsupportedReceiptType(content_type)


def process_receipt(
    file_bytes: bytes,
    content_type: str | None = None,
    filename: str | None = None,
    engine: Optional[OcrEngine] = None,
    progress: Optional[ProgressCallback] = None,
) -> ExtractedReceipt:
    """
    Recognize a receipt and extract its total amount.

    Args:
        file_bytes: Uploaded image or PDF content
        content_type: Media type reported by the client, if any
        filename: Original file name, used for type sniffing and the title
        engine: OCR engine; defaults to the one selected in settings
        progress: Optional OCR progress callback (fractions in [0, 1])

    Returns:
        ExtractedReceipt with OCR text and amount (None when no total found)

    Raises:
        ReceiptProcessingError: Empty upload or unreadable PDF
        ReceiptTooLarge: Upload exceeds MAX_UPLOAD_MB
        UnsupportedReceiptType: Upload is neither an image nor a PDF
        OcrEngineError: OCR failed; the extractor is not run
    """
    if not file_bytes:
        raise ReceiptProcessingError("Receipt file is empty")

    if len(file_bytes) > settings.max_upload_bytes:
        raise ReceiptTooLarge(len(file_bytes), settings.max_upload_bytes)

    source_type = resolve_source_type(file_bytes, content_type, filename)
    logger.info(
        "Processing receipt",
        filename=filename,
        content_type=content_type,
        source_type=source_type,
        size_bytes=len(file_bytes),
    )

    image_bytes = file_bytes
    if source_type == "pdf":
        image_bytes = render_first_page(file_bytes, zoom=settings.pdf_render_zoom)

    engine = engine or get_ocr_engine(settings)
    ocr = engine.recognize(image_bytes, progress=progress)

    match = find_total(ocr.text)
    if match is None:
        logger.warning("No total amount found in receipt text", chars=len(ocr.text))
    else:
        logger.info("Extracted receipt total", amount=match.amount, family=match.family)

    return ExtractedReceipt(
        text=ocr.text,
        amount=match.amount if match else None,
        family=match.family if match else None,
        source_type=source_type,
        engine=ocr.engine,
        suggested_title=suggest_title(filename),
    )
