
from typing import Literal
from pydantic import BaseModel

class OcrResult(BaseModel):
    text: str = ""
    engine: str

class ExtractedReceipt(BaseModel):
    text: str = ""  # Full OCR text
    amount: float | None = None
    family: int | None = None  # Pattern family that produced the amount (1-4)
    source_type: Literal["image", "pdf"] = "image"
    engine: str
    suggested_title: str = ""  # Filename without extension, used as transaction title
    transaction_type: Literal["income", "expense"] = "expense"
