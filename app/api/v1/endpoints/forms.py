"""Lead-capture submission endpoint shared by the contact, quote and certification forms."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.constants.constants import SUBMISSION_RATE_LIMIT
from app.core.ratelimit import limiter
from app.utils.submissions.normalize_submission import client_ip, parse_submission_request

router = APIRouter(tags=["forms"])


@router.post("/send-email")
@limiter.limit(SUBMISSION_RATE_LIMIT)
async def send_email(request: Request):
    """
    Accepts application/json or multipart/form-data (with optional cad_file
    and rfq_file parts). Saves the submission, emails the operator and the
    customer, and answers success unless nothing at all could be done.
    """
    raw = await parse_submission_request(request)
    result = await request.app.state.ingestion_service.ingest(
        raw,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return JSONResponse(status_code=result.status_code, content=result.body)
