"""
Exceptions raised by the receipt pipeline.

The amount extractor never raises; a missing total is reported as None.
These cover the steps around it: upload validation, PDF rasterization
and OCR.
"""


class ReceiptProcessingError(Exception):
    """Base error for anything that stops a receipt from being processed"""


class UnsupportedReceiptType(ReceiptProcessingError):
    """Upload is neither an image nor a PDF"""

    def __init__(self, content_type: str | None):
        self.content_type = content_type
        super().__init__(
            f"Unsupported receipt type: {content_type or 'unknown'}. "
            "Upload an image or a PDF."
        )


class ReceiptTooLarge(ReceiptProcessingError):
    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Receipt is {size_bytes / 1024 / 1024:.2f} MB, "
            f"limit is {limit_bytes / 1024 / 1024:.2f} MB"
        )


class OcrEngineError(ReceiptProcessingError):
    """The OCR engine failed to recognize text"""
