"""
Firebase identity client.

Provides:
- Password sign-up and sign-in through the Identity Toolkit REST API
- Session cookie minting from a fresh ID token
- Refresh token revocation on sign-out
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

import firebase_admin
import httpx
from firebase_admin import auth, credentials, exceptions

from app.core.config import get_settings

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

# Identity Toolkit error codes -> messages shown on the login/signup forms
_ERROR_MESSAGES = {
    "EMAIL_EXISTS": "User already registered",
    "EMAIL_NOT_FOUND": "Invalid login credentials",
    "INVALID_PASSWORD": "Invalid login credentials",
    "INVALID_LOGIN_CREDENTIALS": "Invalid login credentials",
    "USER_DISABLED": "User account is disabled",
    "INVALID_EMAIL": "Invalid email address",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later",
}


class IdentityError(Exception):
    """Raised when the identity provider rejects a request."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class IdentitySession:
    """A freshly authenticated provider session."""

    uid: str
    email: str
    id_token: str
    refresh_token: Optional[str] = None


def get_firebase_app() -> firebase_admin.App:
    """Initialise the Firebase Admin SDK on first use."""
    if not firebase_admin._apps:
        settings = get_settings()
        options = {"projectId": settings.firebase_project_id}
        if settings.google_application_credentials:
            cred = credentials.Certificate(settings.google_application_credentials)
            firebase_admin.initialize_app(cred, options=options)
        else:
            firebase_admin.initialize_app(options=options)
    return firebase_admin.get_app()


def _error_message(code: str) -> str:
    # WEAK_PASSWORD arrives as "WEAK_PASSWORD : Password should be at least 6 characters"
    key = code.split(" : ")[0].strip()
    if key in _ERROR_MESSAGES:
        return _ERROR_MESSAGES[key]
    if " : " in code:
        return code.split(" : ", 1)[1]
    return key.replace("_", " ").capitalize()


class FirebaseIdentityClient:
    """Client for Firebase password authentication and session cookies."""

    def __init__(
        self,
        api_key: str,
        base_url: str = IDENTITY_TOOLKIT_URL,
        session_days: int = 5,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.session_days = session_days
        self.timeout = timeout

    async def sign_up(self, email: str, password: str) -> IdentitySession:
        """Create a password account and return its first session."""
        data = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        logger.info("Created identity account for %s", email)
        return self._session(data, email)

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        """Exchange email/password for an ID token."""
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session(data, email)

    def create_session_cookie(self, id_token: str) -> str:
        """Mint a long-lived session cookie from a fresh ID token."""
        get_firebase_app()
        try:
            cookie = auth.create_session_cookie(
                id_token, expires_in=timedelta(days=self.session_days)
            )
        except (auth.InvalidIdTokenError, ValueError) as e:
            raise IdentityError(f"Could not create session: {e}", status_code=401) from e
        return cookie.decode("utf-8") if isinstance(cookie, bytes) else cookie

    def uid_for(self, token: str, session: bool = True) -> Optional[str]:
        """uid behind a session cookie (or ID token), None once it no longer verifies."""
        get_firebase_app()
        try:
            if session:
                decoded = auth.verify_session_cookie(token)
            else:
                decoded = auth.verify_id_token(token)
        except (auth.InvalidSessionCookieError, auth.InvalidIdTokenError, ValueError) as e:
            logger.info("Ignoring unverifiable credentials on sign-out: %s", e)
            return None
        except exceptions.FirebaseError as e:
            logger.warning("Could not verify credentials on sign-out: %s", e)
            return None
        return decoded["uid"]

    def revoke(self, uid: str) -> None:
        """Revoke all refresh tokens (and therefore session cookies) for a user."""
        get_firebase_app()
        try:
            auth.revoke_refresh_tokens(uid)
        except auth.UserNotFoundError:
            logger.warning("Cannot revoke sessions for unknown uid %s", uid)
        except exceptions.FirebaseError as e:
            logger.warning("Failed to revoke sessions for uid %s: %s", uid, e)

    async def _post(self, action: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/accounts:{action}",
                    params={"key": self.api_key},
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable during %s: %s", action, e)
            raise IdentityError("Authentication service unavailable", status_code=503) from e

        if response.status_code == 200:
            return response.json()

        try:
            code = response.json().get("error", {}).get("message", "")
        except ValueError:
            code = ""
        logger.info("Identity provider rejected %s: %s", action, code or response.status_code)
        status_code = 401 if action == "signInWithPassword" else 400
        raise IdentityError(_error_message(code) if code else "An unexpected error occurred", status_code)

    @staticmethod
    def _session(data: dict[str, Any], email: str) -> IdentitySession:
        return IdentitySession(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
        )


def get_identity_client() -> FirebaseIdentityClient:
    """FastAPI dependency returning the configured identity client."""
    settings = get_settings()
    return FirebaseIdentityClient(
        api_key=settings.firebase_web_api_key,
        session_days=settings.session_cookie_days,
    )
