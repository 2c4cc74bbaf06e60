"""
Turns an inbound /send-email request into a canonical submission.
- Accepts application/json or multipart/form-data bodies
- Folds the per-form field variants into one SubmissionRecord
- Rejects malformed payloads before anything is written or sent
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from app.constants.constants import DEFAULT_FORM_TYPE, MAX_UPLOAD_SIZE, UploadSlot
from app.schemas.submissionSchema import (
    FORM_DATA_VARIANTS,
    GenericFormData,
    OutboundEmail,
    SubmissionRecord,
)
from app.utils.uploads.val_upload_attachment import PendingUpload, UploadRejected, validate_attachment

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


class SubmissionRejected(Exception):
    """A submission refused before any side effect. Rendered as HTTP 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class RawSubmission:
    """The request body split into its logical parts, nothing validated yet."""
    form_type: str
    admin_email: Optional[dict] = None
    customer_email: Any = None
    form_data: dict = field(default_factory=dict)
    recaptcha_token: Optional[str] = None
    recaptcha_action: Optional[str] = None
    uploads: List[PendingUpload] = field(default_factory=list)


def _decode_json_field(value: Any, field_name: str) -> Any:
    """Multipart sends nested objects as JSON strings."""
    if value is None or isinstance(value, (dict, list)):
        return value
    if isinstance(value, UploadFile):
        raise SubmissionRejected(f"Error parsing form data: {field_name} must not be a file")
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return json.loads(value)
    except (TypeError, ValueError) as e:
        raise SubmissionRejected(f"Error parsing form data: {field_name}: {str(e)}")


def _text_field(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _object_field(value: Any, field_name: str) -> Optional[dict]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise SubmissionRejected(f"Error parsing form data: {field_name} must be a JSON object")
    return value


async def _read_upload(form, slot: UploadSlot) -> Optional[PendingUpload]:
    part = form.get(slot.value)
    if not isinstance(part, UploadFile) or not part.filename:
        return None
    # One byte past the cap is enough to know the file is too large
    content = await part.read(MAX_UPLOAD_SIZE + 1)
    return PendingUpload(
        slot=slot,
        filename=part.filename,
        content=content,
        content_type=part.content_type,
    )


async def parse_submission_request(request: Request) -> RawSubmission:
    """Split a JSON or multipart request into a RawSubmission.

    Raises:
        SubmissionRejected: when the body or one of its JSON sub-fields cannot be parsed.
    """
    content_type = request.headers.get("content-type", "")

    if any(kind in content_type for kind in FORM_CONTENT_TYPES):
        form = await request.form()
        try:
            form_data = _decode_json_field(form.get("formData"), "formData")
            raw = RawSubmission(
                form_type=_text_field(form.get("formType")) or DEFAULT_FORM_TYPE,
                admin_email=_object_field(_decode_json_field(form.get("adminEmail"), "adminEmail"), "adminEmail"),
                customer_email=_decode_json_field(form.get("customerEmail"), "customerEmail"),
                form_data=_object_field(form_data, "formData") or {},
                recaptcha_token=_text_field(form.get("recaptchaToken")),
                recaptcha_action=_text_field(form.get("recaptchaAction")),
            )
            for slot in UploadSlot:
                upload = await _read_upload(form, slot)
                if upload is not None:
                    raw.uploads.append(upload)
        finally:
            # Spooled upload files are removed here; contents are already in memory
            await form.close()
        return raw

    try:
        body = await request.json()
    except ValueError as e:
        raise SubmissionRejected(f"Error parsing form data: {str(e)}")

    if not isinstance(body, dict):
        raise SubmissionRejected("Error parsing form data: request body must be a JSON object")

    return RawSubmission(
        form_type=_text_field(body.get("formType")) or DEFAULT_FORM_TYPE,
        admin_email=_object_field(body.get("adminEmail"), "adminEmail"),
        customer_email=body.get("customerEmail"),
        form_data=_object_field(body.get("formData"), "formData") or {},
        recaptcha_token=_text_field(body.get("recaptchaToken")),
        recaptcha_action=_text_field(body.get("recaptchaAction")),
    )


def validate_customer_email(customer_email: Any) -> OutboundEmail:
    """The customer confirmation must be fully addressed before anything happens."""
    if not customer_email:
        raise SubmissionRejected("Customer email data is required")

    if not isinstance(customer_email, dict) or not all(
        _text_field(customer_email.get(key)) for key in ("to", "subject", "html")
    ):
        raise SubmissionRejected("Customer email must have to, subject, and html fields")

    try:
        return OutboundEmail.model_validate({
            "to": customer_email["to"].strip(),
            "subject": customer_email["subject"],
            "html": customer_email["html"],
        })
    except ValidationError:
        raise SubmissionRejected("Customer email 'to' must be a valid email address")


def validate_uploads(uploads: List[PendingUpload]):
    """Reject the whole submission on the first invalid file."""
    for upload in uploads:
        try:
            validate_attachment(upload)
        except UploadRejected as e:
            raise SubmissionRejected(str(e))


def normalize_form_data(
    form_type: str,
    form_data: dict,
    customer_to: Optional[str],
    placeholder_email: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> SubmissionRecord:
    """
    Map a form payload into the canonical record for its form kind.
    Unknown kinds keep every known column.
    """
    variant = FORM_DATA_VARIANTS.get(form_type, GenericFormData)
    data = variant.model_validate(form_data)

    email = data.email or _text_field(customer_to)
    email_is_placeholder = email is None
    if email_is_placeholder:
        logger.warning(
            f"⚠️ No email found in form data or customer email, using placeholder "
            f"(formData keys: {sorted(form_data.keys())})"
        )
        email = placeholder_email

    return SubmissionRecord(
        form_type=form_type,
        name=data.resolved_name(),
        email=email,
        phone=data.phone,
        message=data.resolved_message(),
        requirement=data.requirement,
        ip_address=ip_address,
        user_agent=user_agent,
        email_is_placeholder=email_is_placeholder,
        **data.extra_fields(),
    )


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None
