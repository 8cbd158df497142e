"""
Pytest configuration and shared fixtures.

Registers the integration marker (tests that need a real Tesseract binary
or Azure resources) and provides a fake OCR engine for unit tests.
"""

from io import BytesIO

import fitz  # PyMuPDF
import pytest
from PIL import Image

from receipt_ocr.services.ocr_engines import OcrEngine
from receipt_ocr.services.receipt_types import OcrResult


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against a real Tesseract binary or Azure resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring Tesseract or Azure"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class FakeOcrEngine(OcrEngine):
    """Returns canned text and records what it was asked to recognize"""

    name = "fake"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, image_bytes, progress=None):
        self.calls.append(image_bytes)
        self._report(progress, 0.0)
        if self.error:
            raise self.error
        self._report(progress, 1.0)
        return OcrResult(text=self.text, engine=self.name)


@pytest.fixture
def fake_engine():
    return FakeOcrEngine(text="COFFEE SHOP\nLatte 4.50\nSubtotal 4.50\nTax 0.45\nTotal 4.95\n")


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (40, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


def make_pdf(lines=("Total: $12.50",), pages=1):
    doc = fitz.open()
    for _ in range(pages):
        page = doc.new_page(width=300, height=400)
        for i, line in enumerate(lines):
            page.insert_text((36, 60 + i * 30), line, fontsize=18)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes():
    return make_pdf()
