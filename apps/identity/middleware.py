import logging
from django.utils.deprecation import MiddlewareMixin

from .jwt_auth import ACCESS_COOKIE, get_user_id_from_token
from .models import User

logger = logging.getLogger(__name__)


class JWTCookieAuthenticationMiddleware(MiddlewareMixin):
    """
    Resolve request.user from the access token cookie.
    Runs after AuthenticationMiddleware; a request without the cookie
    keeps whatever user the session produced.
    """

    def process_request(self, request):
        token = request.COOKIES.get(ACCESS_COOKIE)
        if not token:
            return

        user_id = get_user_id_from_token(token)
        if not user_id:
            logger.debug("Ignoring invalid or expired access token")
            return

        user = User.objects.filter(id=user_id, is_active=True).first()
        if user:
            request.user = user
