# =============================================================================
# Bearer Token Authentication
# =============================================================================
#
# This module is the credential verifier:
#   - Access token creation at login
#   - Token validation
#   - The request principal handed to Flask-Login as ``current_user``
#
# Tokens embed a snapshot of the profile taken at login. The snapshot is not
# refreshed from the database, so profile edits are invisible to tokens that
# were issued before them until they expire (JWT_ACCESS_TOKEN_EXPIRES).
#
# =============================================================================

from datetime import datetime, timezone
import logging

from flask import current_app
from flask_login import UserMixin, current_user
import jwt

from .. import login_manager
from ..errors import ApiError, unauthenticated

logger = logging.getLogger(__name__)


# =============================================================================
# Principal
# =============================================================================

class AuthenticatedUser(UserMixin):
    """
    The principal behind a request: a user id plus the profile snapshot
    carried by the token. Never re-fetched from the database.
    """

    def __init__(self, user_id, profile=None):
        self.id = user_id
        self.profile = dict(profile or {})

    @property
    def name(self):
        return self.profile.get('name')

    @property
    def email(self):
        return self.profile.get('email')

    def __repr__(self):
        return f'<AuthenticatedUser {self.id}>'


# =============================================================================
# Token Creation
# =============================================================================

def create_access_token(user):
    """Create a signed access token for a stored user."""
    config = current_app.config
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user.id),
        "user": user.to_token_profile(),
        "iat": now,
        "exp": now + config['JWT_ACCESS_TOKEN_EXPIRES'],
    }

    return jwt.encode(payload, config['JWT_SECRET'], algorithm=config['JWT_ALGORITHM'])


# =============================================================================
# Token Validation
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


def decode_access_token(token):
    """
    Decode and validate an access token.

    Returns:
        AuthenticatedUser built from the token claims

    Raises:
        TokenExpiredError: Token has expired
        TokenInvalidError: Token is invalid
    """
    config = current_app.config
    try:
        payload = jwt.decode(
            token,
            config['JWT_SECRET'],
            algorithms=[config['JWT_ALGORITHM']],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid token: {e}")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise TokenInvalidError("Invalid subject claim")

    profile = payload.get("user") or {}
    if not isinstance(profile, dict):
        raise TokenInvalidError("Invalid profile claim")

    return AuthenticatedUser(user_id, profile)


def extract_bearer_token(header):
    """Return the token from an ``Authorization: Bearer <token>`` value, or None."""
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    return parts[1]


def verify_credentials(header):
    """
    Turn an Authorization header value into a principal.

    Raises:
        ApiError(UNAUTHENTICATED): header absent or malformed, token invalid or expired
    """
    token = extract_bearer_token(header)
    if token is None:
        raise unauthenticated()
    try:
        return decode_access_token(token)
    except TokenExpiredError:
        raise unauthenticated('Token has expired')
    except TokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise unauthenticated('Invalid token')


# =============================================================================
# Flask-Login integration
# =============================================================================

@login_manager.request_loader
def load_user_from_request(request):
    """Attach the principal to the request; anonymous when the header does not verify."""
    if not request.headers.get('Authorization'):
        return None
    try:
        return verify_credentials(request.headers['Authorization'])
    except ApiError:
        return None


@login_manager.unauthorized_handler
def unauthorized():
    raise unauthenticated()


def require_authentication():
    """``before_request`` hook protecting every route of a blueprint."""
    if not current_user.is_authenticated:
        return login_manager.unauthorized()
    return None
