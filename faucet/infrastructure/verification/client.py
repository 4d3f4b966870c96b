"""Clients for captcha "siteverify" endpoints (Cloudflare Turnstile, reCAPTCHA)."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from faucet.core.config import (
    RECAPTCHA_PLACEHOLDER_SECRET,
    TURNSTILE_PLACEHOLDER_SECRET,
    SecuritySettings,
)
from faucet.domain.claims.exceptions import VerificationUnavailableError

logger = logging.getLogger(__name__)


class SiteVerifyClient:
    """Posts a client token to a siteverify endpoint and reads ``success``.

    With an empty or placeholder secret every token passes, which keeps local
    development usable without a captcha account.
    """

    name = "siteverify"
    verify_url = ""
    placeholder_secret = ""

    def __init__(
        self,
        secret_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10,
    ) -> None:
        self._secret_key = secret_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @property
    def enabled(self) -> bool:
        return bool(self._secret_key) and self._secret_key != self.placeholder_secret

    async def verify(self, token: str, remote_ip: str | None = None) -> bool:
        if not self.enabled:
            return True

        form: dict[str, Any] = {"secret": self._secret_key, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip
        try:
            response = await self._client.post(self.verify_url, data=form)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise VerificationUnavailableError(f"{self.name} request failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise VerificationUnavailableError(f"{self.name} returned an unexpected payload")
        success = payload.get("success") is True
        if not success:
            logger.info("%s rejected token: %s", self.name, payload.get("error-codes", []))
        return success

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class TurnstileVerifier(SiteVerifyClient):
    name = "turnstile"
    verify_url = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
    placeholder_secret = TURNSTILE_PLACEHOLDER_SECRET


class RecaptchaVerifier(SiteVerifyClient):
    name = "recaptcha"
    verify_url = "https://www.google.com/recaptcha/api/siteverify"
    placeholder_secret = RECAPTCHA_PLACEHOLDER_SECRET


def build_verifier(settings: SecuritySettings) -> SiteVerifyClient:
    if settings.verification_provider == "recaptcha":
        verifier: SiteVerifyClient = RecaptchaVerifier(
            settings.recaptcha_secret_key, timeout=settings.verification_timeout
        )
    else:
        verifier = TurnstileVerifier(settings.turnstile_secret_key, timeout=settings.verification_timeout)
    if not verifier.enabled:
        logger.warning("No %s secret configured, human verification is disabled", verifier.name)
    return verifier
