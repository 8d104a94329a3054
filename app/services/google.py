import logging
import httpx
from app.core.config import settings
from app.core.errors import AuthenticationError, InternalError

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

async def verify_google_credential(credential: str) -> dict:
    """Check a Google ID token and return its claims."""
    if not settings.GOOGLE_CLIENT_ID:
        raise InternalError("Google sign-in is not configured")

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(settings.GOOGLE_TOKENINFO_URL, params={"id_token": credential})
    except httpx.HTTPError as e:
        logger.error(f"Google token verification failed: {str(e)}")
        raise InternalError("could not reach Google to verify the credential")

    if response.status_code != 200:
        raise AuthenticationError("invalid Google credential")

    claims = response.json()
    if claims.get("aud") != settings.GOOGLE_CLIENT_ID:
        raise AuthenticationError("Google credential was issued for another client")
    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise AuthenticationError("Google credential has an unexpected issuer")
    if str(claims.get("email_verified")).lower() != "true" or not claims.get("email"):
        raise AuthenticationError("Google account email is not verified")
    return claims
