"""
Cloudflare Turnstile verification.

Public form endpoints require a Turnstile token: in the JSON body (`token`)
for POST requests, or as a `token` query parameter for GET. Requests served
on localhost outside production verify against Cloudflare's always-pass
test secret.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Depends, Request

from church_portal.core.config import settings
from church_portal.core.errors import (
    BotProtectionError,
    TURNSTILE_TIMEOUT_OR_DUPLICATE,
    ValidationError,
)

logger = logging.getLogger(__name__)

# https://developers.cloudflare.com/turnstile/troubleshooting/testing/
TURNSTILE_TEST_SECRET_KEY = "1x0000000000000000000000000000000AA"
TURNSTILE_TEST_SITE_KEY = "1x00000000000000000000AA"

DEVELOPMENT_HOSTS = ("localhost", "127.0.0.1")


@dataclass
class VerificationResult:
    success: bool
    error: Optional[str] = None


class TurnstileVerifier:
    """Calls the siteverify endpoint. Never raises: failures come back as a result."""

    def __init__(
        self,
        verify_url: str = settings.TURNSTILE_VERIFY_URL,
        timeout: float = settings.TURNSTILE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.verify_url = verify_url
        self.timeout = timeout
        self.transport = transport

    async def verify(self, token: str, secret_key: str) -> VerificationResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.verify_url,
                    json={"secret": secret_key, "response": token},
                )
                result = response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Error verifying Turnstile token", extra={"component": "turnstile"})
            return VerificationResult(success=False, error="Failed to verify Turnstile token")

        if not result.get("success"):
            codes = result.get("error-codes") or []
            return VerificationResult(
                success=False,
                error=", ".join(codes) or "Turnstile verification failed",
            )
        return VerificationResult(success=True)


def is_development_host(request: Request) -> bool:
    """Local development server: never in production, and only for an exact localhost hostname."""
    if settings.is_production:
        return False
    return request.url.hostname in DEVELOPMENT_HOSTS


def get_secret_key(request: Request) -> str:
    if is_development_host(request):
        return TURNSTILE_TEST_SECRET_KEY
    return settings.TURNSTILE_SECRET_KEY or ""


def get_site_key(request: Request) -> str:
    if is_development_host(request):
        return TURNSTILE_TEST_SITE_KEY
    return settings.TURNSTILE_SITE_KEY or ""


def get_turnstile_verifier() -> TurnstileVerifier:
    return TurnstileVerifier()


async def _extract_token(request: Request) -> Optional[str]:
    if request.method == "GET":
        return request.query_params.get("token")
    try:
        # Starlette caches the body, the endpoint can still parse it afterwards
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("token")
    return None


async def require_turnstile(
    request: Request,
    verifier: TurnstileVerifier = Depends(get_turnstile_verifier),
) -> None:
    """Dependency guarding a public form endpoint."""
    token = await _extract_token(request)
    if not token:
        raise ValidationError("Turnstile token is required")

    verification = await verifier.verify(token, get_secret_key(request))
    if verification.success:
        return

    logger.warning(
        "Turnstile verification failed: %s",
        verification.error,
        extra={"component": "turnstile"},
    )
    message = f"Invalid Turnstile token: {verification.error}"
    if verification.error and "timeout-or-duplicate" in verification.error:
        raise BotProtectionError(message, code=TURNSTILE_TIMEOUT_OR_DUPLICATE)
    raise BotProtectionError(message)
