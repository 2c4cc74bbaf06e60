import httpx
import pytest
from starlette.requests import Request

from app.constants.constants import UploadSlot
from app.utils.submissions.normalize_submission import (
    SubmissionRejected,
    normalize_form_data,
    parse_submission_request,
    validate_customer_email,
    validate_uploads,
)
from app.utils.uploads.val_upload_attachment import PendingUpload
from tests.conftest import multipart_fields, submission_payload

PLACEHOLDER = "no-email@laxmielectronics.com"


def test_quote_form_keeps_shared_fields():
    record = normalize_form_data(
        "quote",
        {"name": "Jane Doe", "email": "jane@x.com", "phone": "1234567", "message": "need parts"},
        customer_to="jane@x.com",
        placeholder_email=PLACEHOLDER,
    )

    assert record.form_type == "quote"
    assert record.name == "Jane Doe"
    assert record.email == "jane@x.com"
    assert record.phone == "1234567"
    assert record.message == "need parts"
    assert record.email_is_placeholder is False


def test_contact_form_joins_split_name_and_reads_alternates():
    record = normalize_form_data(
        "contact",
        {
            "first_name": "Ravi",
            "last_name": "Kumar",
            "email": "ravi@acme-industries.com",
            "mobile_number": "9876543210",
            "organisationName": "Acme",
            "street_address": "12 MG Road",
            "city": "Bangalore",
            "state": "KA",
            "requirement": "Gaskets",
            "estimated_volume": 5000,
            "order_release_date": "2026-11-01",
        },
        customer_to="ravi@acme-industries.com",
        placeholder_email=PLACEHOLDER,
    )

    assert record.name == "Ravi Kumar"
    assert record.phone == "9876543210"
    assert record.organisation_name == "Acme"
    assert record.street_address == "12 MG Road"
    assert record.estimated_volume == "5000"
    assert record.order_release_date == "2026-11-01"
    assert record.message == "Gaskets"
    assert record.requirement == "Gaskets"


def test_only_first_name_is_used_when_last_name_missing():
    record = normalize_form_data("contact", {"first_name": "Ravi"}, "r@acme-industries.com", PLACEHOLDER)

    assert record.name == "Ravi"


def test_phone_takes_precedence_over_mobile_number():
    record = normalize_form_data(
        "quote", {"phone": "111", "mobile_number": "222"}, "a@acme-industries.com", PLACEHOLDER
    )

    assert record.phone == "111"


def test_certification_reads_selected_cert():
    record = normalize_form_data(
        "certification",
        {"name": "Anita", "selectedCert": "IATF 16949"},
        "anita@acme-industries.com",
        PLACEHOLDER,
    )

    assert record.certification_type == "IATF 16949"
    assert record.street_address is None


def test_unknown_form_type_keeps_every_known_column():
    record = normalize_form_data(
        "newsletter",
        {"name": "Sam", "city": "Pune", "certification_type": "ISO 9001"},
        "sam@acme-industries.com",
        PLACEHOLDER,
    )

    assert record.form_type == "newsletter"
    assert record.city == "Pune"
    assert record.certification_type == "ISO 9001"


def test_email_falls_back_to_customer_address_then_placeholder():
    record = normalize_form_data("quote", {"name": "Sam", "email": "  "}, "sam@acme-industries.com", PLACEHOLDER)
    assert record.email == "sam@acme-industries.com"

    record = normalize_form_data("quote", {"name": "Sam"}, None, PLACEHOLDER)
    assert record.email == PLACEHOLDER
    assert record.email_is_placeholder is True
    assert "email_is_placeholder" not in record.column_values()


def test_blank_strings_and_file_leftovers_become_null():
    record = normalize_form_data(
        "contact",
        {"name": "Sam", "city": "", "cad_file": {"path": "C:\\fakepath\\x.dwg"}, "state": {}},
        "sam@acme-industries.com",
        PLACEHOLDER,
    )

    assert record.city is None
    assert record.state is None
    assert record.cad_file is None


def test_request_metadata_is_kept():
    record = normalize_form_data(
        "quote", {"name": "Sam"}, "sam@acme-industries.com", PLACEHOLDER,
        ip_address="203.0.113.9", user_agent="Mozilla/5.0",
    )

    assert record.ip_address == "203.0.113.9"
    assert record.user_agent == "Mozilla/5.0"


def test_template_vars_expose_certification_alias():
    record = normalize_form_data(
        "certification", {"name": "Anita", "selectedCert": "AS9100"}, "anita@acme-industries.com", PLACEHOLDER
    )

    values = record.template_vars()
    assert values["certificationType"] == "AS9100"
    assert values["phone"] == ""


@pytest.mark.parametrize(
    "customer_email, message",
    [
        (None, "Customer email data is required"),
        ({}, "Customer email data is required"),
        ({"to": "jane@x.com", "subject": "Hi"}, "Customer email must have to, subject, and html fields"),
        ({"to": "", "subject": "Hi", "html": "<p>x</p>"}, "Customer email must have to, subject, and html fields"),
        ("jane@x.com", "Customer email must have to, subject, and html fields"),
        ({"to": "not-an-address", "subject": "Hi", "html": "<p>x</p>"}, "Customer email 'to' must be a valid email address"),
    ],
)
def test_customer_email_is_validated(customer_email, message):
    with pytest.raises(SubmissionRejected) as exc_info:
        validate_customer_email(customer_email)

    assert exc_info.value.message == message


def test_valid_customer_email_is_returned():
    email = validate_customer_email({"to": " jane@x.com ", "subject": "Thanks", "html": "<p>Hi</p>"})

    assert email.to == "jane@x.com"
    assert email.subject == "Thanks"


def test_first_invalid_upload_rejects_submission():
    uploads = [
        PendingUpload(UploadSlot.cad_file, "part.dwg", b"dwg"),
        PendingUpload(UploadSlot.rfq_file, "quote.png", b"png"),
    ]

    with pytest.raises(SubmissionRejected) as exc_info:
        validate_uploads(uploads)

    assert "RFQ file" in exc_info.value.message


async def test_multipart_form_is_closed_once_parsed():
    outgoing = httpx.Request(
        "POST",
        "http://testserver/api/send-email",
        data=multipart_fields(submission_payload()),
        files={"cad_file": ("part.dwg", b"AC1027", "application/octet-stream")},
    )
    body = outgoing.read()

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    request = Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/api/send-email",
            "query_string": b"",
            "headers": [(name.lower(), value) for name, value in outgoing.headers.raw],
        },
        receive,
    )

    raw = await parse_submission_request(request)

    assert raw.uploads[0].content == b"AC1027"
    form = await request.form()
    assert form["cad_file"].file.closed
