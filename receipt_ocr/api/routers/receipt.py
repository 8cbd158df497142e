
from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from loguru import logger
from ..deps import ExtractResponse, ParseTextRequest, ParseTextResponse
from ...core.config import settings
from ...services.amount_extractor import find_total, match_families
from ...services.errors import (
    OcrEngineError,
    ReceiptProcessingError,
    ReceiptTooLarge,
    UnsupportedReceiptType,
)
from ...services.ocr_engines import OcrEngine, get_ocr_engine
from ...services.receipt_processor import process_receipt

router = APIRouter(prefix="/receipts", tags=["receipts"])


def get_engine() -> OcrEngine:
    """OCR engine for the current settings (overridden in tests)"""
    return get_ocr_engine(settings)


@router.post("/extract", response_model=ExtractResponse)
async def extract(
    request: Request,
    file: UploadFile = File(None),
    engine: OcrEngine = Depends(get_engine),
):
    """
    OCR a receipt and extract its total amount.

    Accepts either:
    - multipart/form-data (file upload from the budgeting frontend)
    - image/* or application/pdf (raw binary body, e.g. curl --data-binary)

    A receipt without a recognizable total is not an error: amount is null
    and the OCR text is returned so the user can enter the amount manually.
    """
    limit = settings.max_upload_bytes

    if file:
        # Starlette spools uploads to a temp file; check before loading into memory
        if file.size is not None and file.size > limit:
            raise HTTPException(status_code=413, detail=str(ReceiptTooLarge(file.size, limit)))
        content = await file.read()
        content_type = file.content_type
        filename = file.filename
    else:
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > limit:
            raise HTTPException(status_code=413, detail=str(ReceiptTooLarge(int(declared), limit)))
        content = await request.body()
        content_type = request.headers.get("content-type")
        filename = None

    if not content:
        raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")

    try:
        extracted = await run_in_threadpool(
            process_receipt,
            content,
            content_type=content_type,
            filename=filename,
            engine=engine,
        )
    except ReceiptTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except UnsupportedReceiptType as e:
        raise HTTPException(status_code=415, detail=str(e))
    except OcrEngineError as e:
        logger.error(f"OCR processing failed: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))
    except ReceiptProcessingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ExtractResponse(
        amount=extracted.amount,
        family=extracted.family,
        text=extracted.text,
        source_type=extracted.source_type,
        engine=extracted.engine,
        suggested_title=extracted.suggested_title,
        transaction_type=extracted.transaction_type,
    )


def _parse(text: str) -> ParseTextResponse:
    candidates = [
        [c.amount_text.strip() for c in family]
        for family in match_families(text)
    ]
    match = find_total(text)
    if match is None:
        return ParseTextResponse(candidates=candidates)

    return ParseTextResponse(
        amount=match.amount,
        family=match.family,
        keyword=match.candidate.keyword,
        candidate=match.candidate.amount_text.strip(),
        candidates=candidates,
    )


@router.post("/parse-text", response_model=ParseTextResponse)
async def parse_text(req: ParseTextRequest):
    """
    Extract the total amount from text that was already recognized.

    Text longer than MAX_TEXT_CHARS is rejected with 413; the regex scan
    runs in the threadpool so it does not hold up other requests.

    Example request:
    {
        "text": "Subtotal 10.00\\nTax 1.50\\nTotal 11.50"
    }

    Example response:
    {
        "amount": 11.5,
        "family": 2,
        "keyword": "Total",
        "candidate": "11.50",
        "candidates": [[], ["11.50"], [], ["11.50"]]
    }
    """
    if len(req.text) > settings.max_text_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text is {len(req.text)} characters, limit is {settings.max_text_chars}",
        )

    return await run_in_threadpool(_parse, req.text)
