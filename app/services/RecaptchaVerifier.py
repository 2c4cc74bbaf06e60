"""Server-side verification of reCAPTCHA v3 tokens sent by the lead-capture forms."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class RecaptchaResult:
    passed: bool
    reason: Optional[str] = None
    score: Optional[float] = None


class RecaptchaVerifier:
    """
    Checks tokens against Google's siteverify endpoint.

    Verification is skipped when no secret key is configured. If Google
    cannot be reached the token is let through and the outage is logged.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.secret_key = settings.RECAPTCHA_SECRET_KEY
        self.min_score = settings.RECAPTCHA_MIN_SCORE
        self.verify_url = settings.RECAPTCHA_VERIFY_URL
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)

    async def verify(
        self,
        token: Optional[str],
        expected_action: Optional[str] = None,
        remote_ip: Optional[str] = None,
    ) -> RecaptchaResult:
        if not self.enabled:
            return RecaptchaResult(passed=True, reason="disabled")

        if not token:
            return RecaptchaResult(passed=False, reason="reCAPTCHA token is required")

        data = {"secret": self.secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.post(self.verify_url, data=data)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"⚠️ reCAPTCHA verification unavailable, accepting submission: {str(e)}")
            return RecaptchaResult(passed=True, reason="verifier unavailable")

        if not payload.get("success"):
            error_codes = ", ".join(payload.get("error-codes", [])) or "unknown error"
            logger.info(f"🤖 reCAPTCHA rejected token: {error_codes}")
            return RecaptchaResult(passed=False, reason="reCAPTCHA verification failed")

        score = payload.get("score")
        if score is not None and score < self.min_score:
            logger.info(f"🤖 reCAPTCHA score {score} below threshold {self.min_score}")
            return RecaptchaResult(passed=False, reason="reCAPTCHA score too low", score=score)

        action = payload.get("action")
        if expected_action and action and action != expected_action:
            logger.info(f"🤖 reCAPTCHA action mismatch: expected {expected_action}, got {action}")
            return RecaptchaResult(passed=False, reason="reCAPTCHA action mismatch", score=score)

        return RecaptchaResult(passed=True, score=score)
