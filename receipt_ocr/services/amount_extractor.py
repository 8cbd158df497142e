"""
Heuristic extraction of a receipt's total amount from OCR text.

Four regex families are tried in priority order. Within the first family
that matches anything, the last match in the text wins: receipts print the
final, tax-inclusive total below subtotals and tax lines.
"""

import math
import re
from typing import NamedTuple
from loguru import logger

_CURRENCY = r"[$€£₹¥]"

# re.ASCII keeps \b and \d to ASCII word/digit characters.
_FLAGS = re.IGNORECASE | re.ASCII

PATTERN_FAMILIES = (
    # 1. Multi-word keys, grouped or bare integer amounts
    re.compile(
        r"\b(total\s*amount|grand\s*total|amount\s*due|net\s*payable|invoice\s*total)\b"
        rf".*?(-?{_CURRENCY}?\s*\d{{1,3}}(?:[,.]?\d{{3}})*(?:[.,]\d{{1,2}})?)\b",
        _FLAGS,
    ),
    # 2. Single keys, 1,234.56
    re.compile(
        r"\b(total|amount|balance)\b"
        rf".*?(-?{_CURRENCY}?\s*\d{{1,3}}(?:,?\d{{3}})*\.\d{{2}})\b",
        _FLAGS,
    ),
    # 3. Single keys, 1.234,56
    re.compile(
        r"\b(total|amount|balance)\b"
        rf".*?(-?{_CURRENCY}?\s*\d{{1,3}}(?:\.?\d{{3}})*,\d{{2}})\b",
        _FLAGS,
    ),
    # 4. Fallback, e.g. "Total: 5384"
    re.compile(
        r"\b(total|amount|balance|pay)\b[^.,\d]*"
        rf"(-?{_CURRENCY}?\s*(?:\d{{1,3}}(?:[,.\s]?\d{{3}})*|\d+)(?:[.,]\d{{1,2}})?)\b",
        _FLAGS,
    ),
)

_NON_NUMERIC = re.compile(r"[^\d.,-]")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


class CandidateMatch(NamedTuple):
    keyword: str
    amount_text: str


class TotalMatch(NamedTuple):
    amount: float
    family: int
    candidate: CandidateMatch


def clean_amount(raw: str) -> float | None:
    """Normalize a numeral with mixed separators and parse it.

    When both '.' and ',' are present the later one is the decimal
    separator. A lone ',' is a decimal separator. Returns None when the
    cleaned string has no numeric prefix or is too large to be finite.
    """
    cleaned = _NON_NUMERIC.sub("", raw).strip()
    if "." in cleaned and "," in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".", 1)
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".", 1)

    # Lenient like a browser's parseFloat: read the longest numeric prefix.
    match = _FLOAT_PREFIX.match(cleaned)
    if not match:
        return None
    value = float(match.group(1))
    # Digit runs too long for a double overflow to inf
    if not math.isfinite(value):
        return None
    return value


def match_families(text: str) -> list[list[CandidateMatch]]:
    """Return every candidate found by each pattern family, in text order."""
    return [
        [CandidateMatch(m.group(1), m.group(2)) for m in pattern.finditer(text)]
        for pattern in PATTERN_FAMILIES
    ]


def find_total(text: str) -> TotalMatch | None:
    """Run the family cascade and report which family produced the total."""
    if not text:
        return None

    for index, pattern in enumerate(PATTERN_FAMILIES, start=1):
        matches = list(pattern.finditer(text))
        if not matches:
            continue

        last = matches[-1]
        candidate = CandidateMatch(last.group(1), last.group(2))
        logger.debug(
            "Found total candidate",
            family=index,
            matches=len(matches),
            keyword=candidate.keyword,
            amount_text=candidate.amount_text,
        )
        amount = clean_amount(candidate.amount_text)
        if amount is not None:
            return TotalMatch(amount=amount, family=index, candidate=candidate)

    return None


def extract_total(text: str) -> float | None:
    """Best-guess total amount in ``text``, or None when nothing parses."""
    result = find_total(text)
    return result.amount if result else None
