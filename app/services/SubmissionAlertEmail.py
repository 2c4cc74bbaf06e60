import html
import logging
from datetime import datetime, timezone

from app.core.database import PersistenceError
from app.schemas.submissionSchema import SubmissionRecord
from app.services.SMTPEmailService import SMTPEmailService

logger = logging.getLogger(__name__)

DB_FAILURE_SUBJECT = "⚠️ Database Save Failed - Form Submission Alert"


def _row(label: str, value, background: str = "#f9f9f9") -> str:
    value = html.escape(str(value)) if value not in (None, "") else "N/A"
    return f"""
                <tr>
                    <td style="padding: 8px; border: 1px solid #ddd; background-color: {background};"><strong>{label}:</strong></td>
                    <td style="padding: 8px; border: 1px solid #ddd;">{value}</td>
                </tr>"""


def build_db_failure_alert(record: SubmissionRecord, error: PersistenceError, emails_sent: bool) -> str:
    """HTML body summarising a submission that could not be saved."""
    form_rows = "".join([
        _row("Form Type", record.form_type),
        _row("Name", record.name),
        _row("Email", None if record.email_is_placeholder else record.email),
        _row("Phone", record.phone),
        _row("Organisation", record.organisation_name),
        _row("Message", record.message),
        _row("CAD File", record.cad_file),
        _row("RFQ File", record.rfq_file),
        _row("IP Address", record.ip_address),
        _row("Timestamp", datetime.now(timezone.utc).isoformat()),
    ])
    error_rows = "".join([
        _row("Error Type", error.error_type.value, "#fff3cd"),
        _row("Error Message", error.message, "#fff3cd"),
        _row("Error Code", error.code, "#fff3cd"),
    ])
    delivery = "sent successfully" if emails_sent else "attempted"

    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #d32f2f;">⚠️ Database Save Failed</h2>
        <p>A form submission was received and processed, but failed to save to the database.</p>
        <h3 style="color: #08222B; margin-top: 24px;">Form Details:</h3>
        <table style="width: 100%; border-collapse: collapse; margin-top: 12px;">{form_rows}
        </table>
        <h3 style="color: #d32f2f; margin-top: 24px;">Database Error Details:</h3>
        <table style="width: 100%; border-collapse: collapse; margin-top: 12px;">{error_rows}
        </table>
        <h3 style="color: #08222B; margin-top: 24px;">Action Required:</h3>
        <p style="color: #666;">Please check the database connection and ensure the form_submissions table exists and is accessible.</p>
        <p style="color: #666; margin-top: 16px;">Note: Customer and admin emails were {delivery} despite the database error.</p>
    </div>
    """


async def notify_developer_of_db_failure(
    email_service: SMTPEmailService,
    to: str,
    record: SubmissionRecord,
    error: PersistenceError,
    emails_sent: bool,
) -> dict:
    """Send the database failure alert. Failures are logged and returned, never raised."""
    try:
        result = await email_service.send_email(
            to=to,
            subject=DB_FAILURE_SUBJECT,
            html=build_db_failure_alert(record, error, emails_sent),
        )
    except Exception as e:
        logger.error(f"❌ Failed to send dev notification email: {str(e)}")
        return {"success": False, "error": str(e)}

    if result.get("success"):
        logger.info(f"📨 Database failure alert sent to {to}")
    else:
        logger.error(f"❌ Failed to send dev notification email: {result.get('error')}")
    return result
