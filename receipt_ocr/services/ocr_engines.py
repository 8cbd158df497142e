"""
OCR engines that turn a receipt image into text.

Two backends share one interface so the pipeline does not care which runs:
- TesseractEngine: local Tesseract binary through pytesseract (default)
- AzureReadEngine: Azure Document Intelligence prebuilt-read model

Engines report progress as a fraction in [0, 1] through an optional
callback and always finish with 1.0 on success.
"""

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Callable, Optional
from loguru import logger
from PIL import Image, UnidentifiedImageError
import pytesseract
from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from .errors import OcrEngineError
from .receipt_types import OcrResult
from ..core.config import Settings

ProgressCallback = Callable[[float], None]


class OcrEngine(ABC):
    """
    Abstract base class for OCR backends.

    Implementations receive image bytes (PNG/JPEG/...) and return the
    recognized text. PDF receipts are rasterized before they get here.
    """

    name: str = "ocr"

    @abstractmethod
    def recognize(self, image_bytes: bytes, progress: Optional[ProgressCallback] = None) -> OcrResult:
        """
        Recognize text in an image.

        Args:
            image_bytes: Encoded image content
            progress: Optional callback receiving fractions in [0, 1]

        Returns:
            OcrResult with the recognized text

        Raises:
            OcrEngineError: The backend failed or the image is unreadable
        """
        pass

    @staticmethod
    def _report(progress: Optional[ProgressCallback], value: float) -> None:
        if progress is not None:
            progress(min(max(value, 0.0), 1.0))


class TesseractEngine(OcrEngine):
    name = "tesseract"

    def __init__(self, language: str = "eng", tesseract_cmd: str | None = None):
        self.language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_bytes: bytes, progress: Optional[ProgressCallback] = None) -> OcrResult:
        self._report(progress, 0.0)

        try:
            image = Image.open(BytesIO(image_bytes))
            # Palette/CMYK/alpha images confuse Tesseract; grayscale reads best
            image = image.convert("L")
        except (UnidentifiedImageError, OSError) as e:
            raise OcrEngineError(f"Cannot open image: {str(e)}") from e

        logger.info("Running Tesseract OCR", language=self.language, width=image.width, height=image.height)

        try:
            text = pytesseract.image_to_string(image, lang=self.language)
        except pytesseract.TesseractNotFoundError as e:
            raise OcrEngineError(
                "Tesseract OCR binary not found. Install tesseract-ocr or set TESSERACT_CMD."
            ) from e
        except pytesseract.TesseractError as e:
            raise OcrEngineError(f"Tesseract OCR failed: {str(e)}") from e

        self._report(progress, 1.0)
        logger.info("Tesseract OCR complete", chars=len(text))
        return OcrResult(text=text, engine=self.name)


class AzureReadEngine(OcrEngine):
    name = "azure"

    def __init__(self, endpoint: str, api_key: str, client: DocumentIntelligenceClient | None = None):
        self.endpoint = endpoint
        self.client = client or DocumentIntelligenceClient(
            endpoint=endpoint,
            credential=AzureKeyCredential(api_key)
        )

    def recognize(self, image_bytes: bytes, progress: Optional[ProgressCallback] = None) -> OcrResult:
        self._report(progress, 0.0)
        logger.info(f"Analyzing receipt image of size {len(image_bytes)} bytes with Azure prebuilt-read")

        try:
            poller = self.client.begin_analyze_document(
                "prebuilt-read",
                body=image_bytes,
                content_type="application/octet-stream"
            )
            # Upload accepted, analysis is running server-side
            self._report(progress, 0.5)
            result = poller.result()
        except Exception as e:
            logger.error(f"Azure DI read failed: {str(e)}")
            raise OcrEngineError(f"Azure OCR failed: {str(e)}") from e

        text = result.content if getattr(result, "content", None) else ""
        self._report(progress, 1.0)
        logger.info("Azure OCR complete", chars=len(text))
        return OcrResult(text=text, engine=self.name)


def get_ocr_engine(settings: Settings) -> OcrEngine:
    """
    Build the OCR engine selected by OCR_ENGINE.

    "azure" without AZ_DI_ENDPOINT and AZ_DI_API_KEY falls back to Tesseract.
    """
    if settings.ocr_engine == "azure":
        if settings.az_di_endpoint and settings.az_di_api_key:
            endpoint = settings.az_di_endpoint
            logger.info(
                "Using Azure Document Intelligence for OCR",
                endpoint=endpoint[:50] + "..." if len(endpoint) > 50 else endpoint
            )
            return AzureReadEngine(endpoint, settings.az_di_api_key)

        logger.warning(
            "OCR_ENGINE=azure but Azure Document Intelligence is not configured - "
            "falling back to Tesseract. Set AZ_DI_ENDPOINT and AZ_DI_API_KEY."
        )

    return TesseractEngine(language=settings.ocr_language, tesseract_cmd=settings.tesseract_cmd)
