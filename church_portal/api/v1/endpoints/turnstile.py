from fastapi import APIRouter, Request

from church_portal.core.turnstile import get_site_key

router = APIRouter()


@router.get("/turnstile-config")
async def turnstile_config(request: Request) -> dict:
    """Site key for the frontend widget (Cloudflare's test key on localhost)."""
    return {"siteKey": get_site_key(request)}
