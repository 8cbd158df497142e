"""
First-page rasterization for PDF receipts.

OCR engines take images, so a PDF receipt is rendered to a PNG of its first
page before recognition. Receipts are single-page in practice.
"""

from pathlib import PurePath
from loguru import logger
import fitz  # PyMuPDF
from .errors import ReceiptProcessingError

PDF_CONTENT_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF"


def is_pdf(data: bytes, content_type: str | None = None, filename: str | None = None) -> bool:
    """Detect a PDF from its content type, its file suffix or its magic bytes."""
    if content_type and content_type.split(";")[0].strip().lower() == PDF_CONTENT_TYPE:
        return True
    if filename and PurePath(filename).suffix.lower() == ".pdf":
        return True
    return data[:4] == PDF_MAGIC


def render_first_page(pdf_bytes: bytes, zoom: float = 2.5) -> bytes:
    """
    Render page 1 of a PDF to PNG bytes.

    Args:
        pdf_bytes: Raw PDF file content
        zoom: Scale factor applied to the page (2.5 gives ~180 DPI, enough for OCR)

    Returns:
        PNG-encoded image of the first page

    Raises:
        ReceiptProcessingError: PDF is empty, unreadable or has no pages
    """
    if not pdf_bytes:
        raise ReceiptProcessingError("PDF is empty")

    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise ReceiptProcessingError("PDF has no pages")

            page = doc.load_page(0)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            png_bytes = pix.tobytes("png")
            logger.info(
                "Rendered first PDF page",
                pages=doc.page_count,
                width=pix.width,
                height=pix.height,
                zoom=zoom,
            )
            return png_bytes
    except ReceiptProcessingError:
        raise
    except Exception as e:
        logger.error(f"PDF rendering failed: {str(e)}")
        raise ReceiptProcessingError(f"Failed to process PDF: {str(e)}") from e
