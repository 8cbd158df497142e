
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("receipt-ocr", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # OCR engine selection: local Tesseract or Azure Document Intelligence
    ocr_engine: Literal["tesseract", "azure"] = Field("tesseract", alias="OCR_ENGINE")
    ocr_language: str = Field("eng", alias="OCR_LANGUAGE")
    tesseract_cmd: str | None = Field(default=None, alias="TESSERACT_CMD")

    # Azure Document Intelligence (prebuilt-read)
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")

    # Uploads
    pdf_render_zoom: float = Field(2.5, alias="PDF_RENDER_ZOOM")
    max_upload_mb: float = Field(10.0, alias="MAX_UPLOAD_MB")
    # Already-recognized text sent to /receipts/parse-text
    max_text_chars: int = Field(20000, alias="MAX_TEXT_CHARS")

    # CORS allowed origins (comma-separated list, the budgeting frontend)
    cors_origins: str = Field("http://localhost:5173,http://127.0.0.1:5173", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)

settings = Settings()
