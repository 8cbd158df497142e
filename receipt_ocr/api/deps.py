
from pydantic import BaseModel

class ExtractResponse(BaseModel):
    amount: float | None = None
    family: int | None = None  # Pattern family (1-4) that matched, None when no total found
    text: str = ""  # Full OCR text, shown to the user for review
    source_type: str = "image"
    engine: str | None = None
    suggested_title: str = ""  # Pre-fills the transaction title
    transaction_type: str = "expense"

class ParseTextRequest(BaseModel):
    text: str

class ParseTextResponse(BaseModel):
    amount: float | None = None
    family: int | None = None
    keyword: str | None = None  # Keyword of the winning candidate, e.g. "Total"
    candidate: str | None = None  # Raw numeral text before normalization
    candidates: list[list[str]] = []  # Raw numerals matched by each family (1-4), in text order
