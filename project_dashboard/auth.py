"""Session-backed authentication state.

Signing in is delegated to an external identity provider. Once it has
verified the user it hands off to /sign-in with a token signed with the
secret both sides share (SIGN_IN_SECRET). Only a token that verifies
and has not expired puts the user in the Flask session. The rest of the
app only asks whether a user is signed in and what to call them.
"""
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import jsonify, session
from itsdangerous import BadSignature, URLSafeTimedSerializer

from project_dashboard.exceptions import Unauthorized

SESSION_USER_ID = 'user_id'
SESSION_FIRST_NAME = 'first_name'
SESSION_LAST_NAME = 'last_name'

SIGN_IN_SALT = 'project-dashboard-sign-in'


@dataclass(frozen=True)
class AuthState:
    """What the dashboard knows about the current user.

    Attributes:
        is_loaded: False while the session is still being resolved.
        is_signed_in: True if a user is signed in.
        user_id: Identity provider's id for the user.
        first_name: Given name, if the provider supplied one.
        last_name: Family name, if the provider supplied one.
    """
    is_loaded: bool = True
    is_signed_in: bool = False
    user_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        """Full name for the welcome banner, or None if unknown."""
        parts = [p for p in (self.first_name, self.last_name) if p]
        return ' '.join(parts) or None


def current_auth() -> AuthState:
    """Read the authentication state from the Flask session."""
    user_id = session.get(SESSION_USER_ID)
    if not user_id:
        return AuthState(is_signed_in=False)
    return AuthState(
        is_signed_in=True,
        user_id=user_id,
        first_name=session.get(SESSION_FIRST_NAME),
        last_name=session.get(SESSION_LAST_NAME),
    )


def require_auth() -> AuthState:
    """Return the signed-in user's state.

    Raises:
        Unauthorized: If no user is signed in.
    """
    auth = current_auth()
    if not auth.is_signed_in:
        raise Unauthorized()
    return auth


def _token_serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=SIGN_IN_SALT)


def make_sign_in_token(secret: str, user_id: str, first_name: Optional[str] = None,
                       last_name: Optional[str] = None) -> str:
    """Sign an identity the way the identity provider does for the hand-off."""
    claims = {'user_id': user_id}
    if first_name:
        claims['first_name'] = first_name
    if last_name:
        claims['last_name'] = last_name
    return _token_serializer(secret).dumps(claims)


def verify_sign_in_token(token: str, secret: Optional[str], max_age: int) -> dict:
    """Check a hand-off token and return the identity it carries.

    Args:
        token: Token posted by the identity provider.
        secret: Secret shared with the provider; sign-in is refused
            when it is not configured.
        max_age: Seconds a token stays valid after it was issued.

    Returns:
        Claims dict with user_id and optional first_name, last_name.

    Raises:
        Unauthorized: If the secret is missing, or the token is forged,
            tampered with, expired or malformed.
    """
    if not secret:
        raise Unauthorized()
    try:
        claims = _token_serializer(secret).loads(token, max_age=max_age)
    except BadSignature:
        raise Unauthorized()
    if not isinstance(claims, dict):
        raise Unauthorized()
    return claims


def sign_in_user(user_id: str, first_name: Optional[str] = None,
                 last_name: Optional[str] = None) -> AuthState:
    """Store a verified user in the session.

    Raises:
        ValueError: If user_id is empty.
    """
    if not user_id or not str(user_id).strip():
        raise ValueError("Missing required field: user_id")
    session.clear()
    session[SESSION_USER_ID] = str(user_id).strip()
    if first_name:
        session[SESSION_FIRST_NAME] = first_name.strip()
    if last_name:
        session[SESSION_LAST_NAME] = last_name.strip()
    return current_auth()


def sign_out_user() -> None:
    """Forget the signed-in user."""
    session.clear()


def signed_in_required(view):
    """Decorator for JSON endpoints that need a signed-in user.

    Responds 401 with an error body instead of calling the view.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        try:
            require_auth()
        except Unauthorized as e:
            return jsonify({'error': e.message}), 401
        return view(*args, **kwargs)
    return wrapped
