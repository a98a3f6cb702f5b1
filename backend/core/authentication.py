"""
Bearer token authentication backed by the auction backend.

The gateway never issues tokens. It verifies the caller's token against
/api/auth/verify and caches the verified user for a few minutes.
"""
import logging

from django.core.cache import cache
from rest_framework import authentication, exceptions

from .cache_utils import make_cache_key, TOKEN_VERIFY_CACHE_TTL
from .upstream import BackendClient, UpstreamError

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = 'super_admin'
ADMIN_ROLES = ('super_admin', 'admin')


class BackOfficeUser:
    """Verified backend user attached to request.user."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, data):
        self.data = data or {}
        self.id = self.data.get('id')
        self.email = self.data.get('email', '')
        self.role = self.data.get('role') or 'user'
        self.brand_code = self.data.get('brand_code') or self.data.get('brand')
        self.is_active = self.data.get('is_active', True)

    def __str__(self):
        return self.email or str(self.id)

    @property
    def is_super_admin(self):
        return self.role == SUPER_ADMIN_ROLE

    @property
    def has_admin_access(self):
        return self.role in ADMIN_ROLES


def token_cache_key(token):
    return make_cache_key('auth_token', token)


def verify_token(token):
    """
    Verify a token with the backend and return the user payload.

    Returns None when the backend rejects the token.
    """
    cache_key = token_cache_key(token)
    cached_user = cache.get(cache_key)
    if cached_user is not None:
        return cached_user

    try:
        payload = BackendClient(token=token).get('/api/auth/verify')
    except UpstreamError as e:
        if e.status_code in (401, 403):
            return None
        raise

    if not payload or not payload.get('valid'):
        return None

    user_data = payload.get('user') or {}
    cache.set(cache_key, user_data, TOKEN_VERIFY_CACHE_TTL)
    return user_data


class BackendTokenAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Invalid authorization header.')

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token encoding.')

        try:
            user_data = verify_token(token)
        except UpstreamError as e:
            logger.warning(f"Token verification unavailable: {e.message}")
            raise exceptions.AuthenticationFailed('Unable to verify token.')

        if user_data is None:
            raise exceptions.AuthenticationFailed('Token is invalid or expired.')

        user = BackOfficeUser(user_data)
        if not user.is_active:
            raise exceptions.AuthenticationFailed('User account is disabled.')
        return (user, token)

    def authenticate_header(self, request):
        return self.keyword
