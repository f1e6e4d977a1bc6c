"""Thin wrapper over Supabase auth."""

from typing import Any, Callable, Optional

from protea.models.profile import AuthUser
from protea.services.supabase_client import SupabaseClient, get_supabase_client
from protea.utils.errors import AuthenticationError
from protea.utils.logging import get_structured_logger, mask_email, mask_user_id

logger = get_structured_logger(__name__)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer ...`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_user_from_token(access_token: Optional[str]) -> AuthUser:
    """Resolve a session access token to its user. Raises AuthenticationError."""
    if not access_token:
        raise AuthenticationError("Missing access token")

    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user(access_token)
        except Exception as e:
            raise AuthenticationError(f"Invalid session: {e}")

    if response is None or response.user is None:
        raise AuthenticationError("Invalid session")
    return AuthUser.from_supabase(response.user)


async def sign_in(email: str, password: str) -> tuple[AuthUser, Optional[str]]:
    """Password sign-in; returns the user and the session access token."""
    async with SupabaseClient() as client:
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning("Sign-in failed", email=mask_email(email), error=str(e))
            raise AuthenticationError(f"Sign-in failed: {e}")

    if response.user is None:
        raise AuthenticationError("Sign-in failed")

    user = AuthUser.from_supabase(response.user)
    token = response.session.access_token if response.session else None
    logger.info("User signed in", user_id=mask_user_id(user.id))
    return user, token


async def sign_out() -> None:
    async with SupabaseClient() as client:
        client.auth.sign_out()


def on_auth_state_change(callback: Callable[[str, Optional[AuthUser]], Any]) -> Callable[[], None]:
    """Subscribe to auth events; returns the unsubscribe function."""
    def _forward(event: Any, session: Any) -> None:
        user = AuthUser.from_supabase(session.user) if session and session.user else None
        callback(str(getattr(event, "value", event)), user)

    subscription = get_supabase_client().auth.on_auth_state_change(_forward)
    return subscription.unsubscribe
