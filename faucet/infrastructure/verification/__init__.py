"""Human-verification service clients."""

from .client import RecaptchaVerifier, SiteVerifyClient, TurnstileVerifier, build_verifier

__all__ = ["RecaptchaVerifier", "SiteVerifyClient", "TurnstileVerifier", "build_verifier"]
