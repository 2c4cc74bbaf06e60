"""SMTP client for operator notifications and customer confirmations."""

import logging
import mimetypes
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import aiosmtplib
from fastapi.concurrency import run_in_threadpool

from app.constants.constants import SMTP_NOT_CONFIGURED
from app.core.config import Settings
from app.utils.email_templates import single_line
from app.utils.uploads.val_upload_attachment import StoredAttachment

logger = logging.getLogger(__name__)

# (path on disk, filename shown to the recipient)
Attachment = Tuple[str, str]


def prepare_attachments(stored_files: Iterable[StoredAttachment]) -> List[Attachment]:
    """Attachment pairs for the uploads of one submission, under their original names."""
    return [
        (stored.path, stored.original_filename or stored.slot.value)
        for stored in stored_files
        if stored is not None
    ]


def _read_file(path: str) -> bytes:
    return Path(path).read_bytes()


class SMTPEmailService:
    """
    Sends HTML email through the configured SMTP server.

    send_email never raises: every outcome, including a missing
    configuration, comes back as a result dict so callers can keep going
    when mail is unavailable.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return self.settings.smtp_configured

    @property
    def sender(self) -> str:
        return formataddr((self.settings.SMTP_FROM_NAME, self.settings.smtp_from_address))

    def _connection_kwargs(self) -> dict:
        return {
            "hostname": self.settings.SMTP_HOST,
            "port": self.settings.SMTP_PORT,
            "use_tls": self.settings.SMTP_SECURE,
            "validate_certs": self.settings.SMTP_VALIDATE_CERTS,
            "timeout": self.settings.SMTP_TIMEOUT,
        }

    async def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[Sequence[Attachment]] = None,
        bcc: Optional[str] = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = single_line(subject)
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=self.settings.smtp_from_address.rpartition("@")[2] or None)
        if bcc:
            message["Bcc"] = bcc

        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype="html")

        for path, filename in attachments or []:
            content = await run_in_threadpool(_read_file, path)
            mime_type, _ = mimetypes.guess_type(filename)
            maintype, _, subtype = (mime_type or "application/octet-stream").partition("/")
            message.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)

        return message

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[Sequence[Attachment]] = None,
        bcc: Optional[str] = None,
    ) -> dict:
        """
        Send one email.

        Returns:
            dict: {"success": True, "messageId", "message"} when the server
            accepted the message, otherwise {"success": False, "error", "message"}.
        """
        if not self.is_configured:
            logger.warning(f"⚠️ SMTP not configured, skipping email to {to}")
            return {
                "success": False,
                "error": SMTP_NOT_CONFIGURED,
                "message": "SMTP configuration is missing. Please check your .env file.",
            }

        try:
            message = await self.build_message(to, subject, html, attachments=attachments, bcc=bcc)
            await aiosmtplib.send(
                message,
                username=self.settings.SMTP_USER,
                password=self.settings.SMTP_PASSWORD,
                **self._connection_kwargs(),
            )
            message_id = message["Message-ID"]
            logger.info(f"✅ Email sent to {to}: {message_id}")
            return {
                "success": True,
                "messageId": message_id,
                "message": "Email sent successfully",
            }
        except Exception as e:
            logger.error(f"❌ Error sending email to {to}: {str(e)}")
            return {
                "success": False,
                "error": str(e) or type(e).__name__,
                "message": "Failed to send email",
            }

    async def verify_connection(self) -> bool:
        """Connect and authenticate against the SMTP server without sending anything."""
        if not self.is_configured:
            return False

        smtp = aiosmtplib.SMTP(**self._connection_kwargs())
        try:
            await smtp.connect()
            await smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
            logger.info("✅ SMTP server connection verified successfully")
            return True
        except Exception as e:
            logger.error(f"❌ SMTP connection verification failed: {str(e)}")
            return False
        finally:
            if smtp.is_connected:
                try:
                    await smtp.quit()
                except aiosmtplib.SMTPException:
                    smtp.close()
