"""
Ingestion pipeline behind POST /api/send-email.

received -> normalized (or rejected) -> persisted | persist-failed
         -> notified | partially-notified | not-notified -> response

A lead is only reported as lost when the database write and both
emails failed. Every other combination answers success with a warning.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from jinja2 import TemplateError
from sqlalchemy import select

from app.constants.constants import (
    DEFAULT_ADMIN_HTML,
    DEFAULT_ADMIN_SUBJECT,
    SMTP_NOT_CONFIGURED,
    TemplateType,
)
from app.core.config import Settings
from app.core.database import DatabaseSessionManager, PersistenceError, classify_db_error
from app.models.emailtemplate import EmailTemplate
from app.models.formsubmission import FormSubmission
from app.schemas.submissionSchema import AdminEmailRequest, OutboundEmail, SubmissionRecord
from app.services.RecaptchaVerifier import RecaptchaVerifier
from app.services.SMTPEmailService import SMTPEmailService, prepare_attachments
from app.services.SubmissionAlertEmail import notify_developer_of_db_failure
from app.utils.email_templates import render_template_body, render_template_subject, single_line
from app.utils.submissions.normalize_submission import (
    RawSubmission,
    SubmissionRejected,
    normalize_form_data,
    validate_customer_email,
    validate_uploads,
)
from app.utils.uploads.val_upload_attachment import StoredAttachment, store_attachment

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    status_code: int
    body: dict


class SubmissionIngestionService:
    """Sequences normalization, persistence and notification for one submission."""

    def __init__(
        self,
        settings: Settings,
        session_manager: DatabaseSessionManager,
        email_service: SMTPEmailService,
        recaptcha: RecaptchaVerifier,
    ):
        self.settings = settings
        self.session_manager = session_manager
        self.email_service = email_service
        self.recaptcha = recaptcha
        self.background_tasks: Set[asyncio.Task] = set()

    async def ingest(
        self,
        raw: RawSubmission,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IngestionResult:
        """
        Run one submission through the pipeline.

        Raises:
            SubmissionRejected: before any side effect, for a malformed
                customer email, an invalid upload or a failed reCAPTCHA check.
        """
        logger.info(
            f"📧 Form submission received: type={raw.form_type}, "
            f"files={[upload.slot.value for upload in raw.uploads]}, "
            f"formData keys={sorted(raw.form_data.keys())}"
        )

        customer_email = validate_customer_email(raw.customer_email)
        validate_uploads(raw.uploads)
        await self._check_recaptcha(raw, ip_address)

        record = normalize_form_data(
            raw.form_type,
            raw.form_data,
            customer_to=customer_email.to,
            placeholder_email=self.settings.PLACEHOLDER_EMAIL,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        stored_files = await self._store_uploads(raw)
        if stored_files:
            record = record.model_copy(
                update={stored.slot.value: stored.public_path for stored in stored_files}
            )

        submission_id, persistence_error = await self._persist(record)

        if not self.email_service.is_configured:
            logger.warning("⚠️ SMTP not configured. Emails will not be sent.")
            return self._smtp_missing_response(submission_id)

        admin_subject, admin_html = await self._compose_admin_email(
            raw.admin_email, record, use_templates=persistence_error is None
        )

        admin_result, customer_result = await asyncio.gather(
            self.email_service.send_email(
                to=self.settings.ADMIN_EMAIL,
                subject=admin_subject,
                html=admin_html,
                attachments=prepare_attachments(stored_files),
            ),
            self._send_customer_email(customer_email),
        )

        if persistence_error is not None:
            self.dispatch_alert(
                record,
                persistence_error,
                emails_sent=admin_result["success"] and customer_result["success"],
            )

        return self._compose_response(submission_id, admin_result, customer_result)

    async def _check_recaptcha(self, raw: RawSubmission, ip_address: Optional[str]):
        result = await self.recaptcha.verify(raw.recaptcha_token, raw.recaptcha_action, ip_address)
        if not result.passed:
            logger.warning(f"🤖 Submission rejected by reCAPTCHA: {result.reason}")
            raise SubmissionRejected(result.reason)

    async def _store_uploads(self, raw: RawSubmission) -> List[StoredAttachment]:
        stored_files = []
        for upload in raw.uploads:
            stored_files.append(await store_attachment(upload, self.settings.UPLOADS_DIR))
        return stored_files

    async def _persist(self, record: SubmissionRecord) -> Tuple[Optional[int], Optional[PersistenceError]]:
        """Insert the submission. A failure is classified and returned, never raised."""
        try:
            async with self.session_manager.get_session() as session:
                submission = FormSubmission(**record.column_values())
                session.add(submission)
                await session.flush()
                new_id = submission.id
        except Exception as e:
            error = classify_db_error(e)
            logger.error(
                f"❌ Error saving to database ({error.error_type.value}, code={error.code}): {error.message}"
            )
            return None, error

        logger.info(f"✅ Form submission saved to database with ID: {new_id} (type={record.form_type})")
        if record.email_is_placeholder:
            logger.warning(f"⚠️ Submission {new_id} stored without a reachable email address")
        return new_id, None

    async def _stored_admin_template(self, form_type: str) -> Optional[EmailTemplate]:
        try:
            async with self.session_manager.get_session() as session:
                result = await session.execute(
                    select(EmailTemplate).where(
                        EmailTemplate.form_type == form_type,
                        EmailTemplate.template_type == TemplateType.admin.value,
                    )
                )
                return result.scalar_one_or_none()
        except Exception as e:
            logger.warning(f"⚠️ Could not read admin email template for {form_type}: {classify_db_error(e).message}")
            return None

    async def _compose_admin_email(
        self,
        admin_email: Optional[dict],
        record: SubmissionRecord,
        use_templates: bool = True,
    ) -> Tuple[str, str]:
        """Subject and body for the operator. The destination is never taken from the client."""
        requested = AdminEmailRequest.model_validate(admin_email or {})
        if requested.to and requested.to != self.settings.ADMIN_EMAIL:
            logger.info(f"Admin email overridden: {requested.to} -> {self.settings.ADMIN_EMAIL}")

        subject, body = requested.subject, requested.html

        if (subject is None or body is None) and use_templates:
            template = await self._stored_admin_template(record.form_type)
            if template is not None:
                values = record.template_vars()
                try:
                    subject = subject or render_template_subject(template.subject, values)
                    body = body or render_template_body(template.body, values)
                except TemplateError as e:
                    logger.warning(f"⚠️ Admin email template for {record.form_type} could not be rendered: {str(e)}")

        return single_line(subject) or DEFAULT_ADMIN_SUBJECT, body or DEFAULT_ADMIN_HTML

    async def _send_customer_email(self, customer_email: OutboundEmail) -> dict:
        return await self.email_service.send_email(
            to=customer_email.to,
            subject=customer_email.subject,
            html=customer_email.html,
        )

    def dispatch_alert(self, record: SubmissionRecord, error: PersistenceError, emails_sent: bool):
        """Fire-and-forget alert to the developer address. Never awaited by the request."""
        task = asyncio.create_task(
            notify_developer_of_db_failure(
                self.email_service,
                self.settings.dev_alert_email,
                record,
                error,
                emails_sent,
            )
        )
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)

    async def drain_background_tasks(self, timeout: float = 30.0):
        """Wait for pending alerts, e.g. on shutdown."""
        if not self.background_tasks:
            return
        pending = list(self.background_tasks)
        logger.info(f"⏳ Waiting for {len(pending)} pending alert email(s)...")
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            logger.warning(f"⚠️ Cancelled {len(still_pending)} alert email(s) still pending at shutdown")

    def _smtp_missing_response(self, submission_id: Optional[int]) -> IngestionResult:
        persisted = submission_id is not None
        message = "Form submitted successfully. SMTP configuration is missing, so emails were not sent."
        warning = "Please configure SMTP in .env file to enable email notifications"
        if not persisted:
            message += " Note: Database save failed, but submission was processed."
            warning += ". Also check database connection."

        return IngestionResult(200, {
            "success": True,
            "message": message,
            "submissionId": submission_id,
            "warning": warning,
            "adminEmail": {"success": False, "error": SMTP_NOT_CONFIGURED},
            "customerEmail": {"success": False, "error": SMTP_NOT_CONFIGURED},
        })

    def _compose_response(self, submission_id: Optional[int], admin_result: dict, customer_result: dict) -> IngestionResult:
        persisted = submission_id is not None
        admin_ok = admin_result["success"]
        customer_ok = customer_result["success"]

        if not persisted and not admin_ok and not customer_ok:
            logger.error("❌ Form submission lost: database save and both emails failed")
            return IngestionResult(500, {
                "success": False,
                "message": "Form submission failed. Please check your connection and try again.",
                "submissionId": None,
                "adminEmail": admin_result,
                "customerEmail": customer_result,
                "error": "Both database save and email sending failed",
            })

        warnings = []
        if not persisted:
            warnings.append("Database save failed, but form was processed successfully")

        if admin_ok and customer_ok:
            message = "Form submitted and emails sent successfully"
            if not persisted:
                message += ". Note: Database save failed, but submission was processed."
        elif admin_ok or customer_ok:
            message = "Form submitted successfully. Some emails may have failed."
            if not persisted:
                message += " Note: Database save failed."
            failed = "Customer confirmation" if admin_ok else "Admin notification"
            warnings.append(f"{failed} email could not be sent")
        else:
            message = "Form submitted successfully. Email sending failed, but submission was saved."
            warnings.append("Email sending failed, but form was saved to database")

        logger.info(
            f"📬 Submission outcome: persisted={persisted}, admin_email={admin_ok}, customer_email={customer_ok}"
        )
        return IngestionResult(200, {
            "success": True,
            "message": message,
            "submissionId": submission_id,
            "warning": ". ".join(warnings) if warnings else None,
            "adminEmail": admin_result,
            "customerEmail": customer_result,
        })
