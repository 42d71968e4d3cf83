"""
Identity API endpoints.

Login sets JWT tokens in httpOnly cookies; the cookie middleware turns
them back into request.user on later calls.
"""
import os

from django.conf import settings
from django.contrib.auth import authenticate
from django.http import HttpRequest, HttpResponse
from ninja import Router
from ninja.errors import HttpError

from .dtos import LoginIn, TokenResponse, UserDTO
from .jwt_auth import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    access_cookie_settings,
    create_token_pair,
    refresh_cookie_settings,
)
from .models import UserStatus
from .services import to_user_dto

router = Router(tags=["Identity"])


def is_production() -> bool:
    """Lambda or DEBUG=False."""
    return bool(os.getenv('AWS_LAMBDA_FUNCTION_NAME')) or not settings.DEBUG


def _json_response(data: TokenResponse) -> HttpResponse:
    return HttpResponse(data.model_dump_json(), content_type='application/json')


@router.post("/login", response=TokenResponse, auth=None)
def login_user(request: HttpRequest, payload: LoginIn):
    user = authenticate(request, username=payload.username, password=payload.password)
    if user is None:
        raise HttpError(401, "Invalid username or password")
    if user.status == UserStatus.RESTRICTED:
        raise HttpError(401, "Account is restricted")

    access_token, refresh_token = create_token_pair(user)
    response = _json_response(TokenResponse(success=True, user=to_user_dto(user)))

    secure = is_production()
    response.set_cookie(ACCESS_COOKIE, access_token, **access_cookie_settings(secure))
    response.set_cookie(REFRESH_COOKIE, refresh_token, **refresh_cookie_settings(secure))
    return response


@router.post("/logout", response=TokenResponse, auth=None)
def logout_user(request: HttpRequest):
    response = _json_response(TokenResponse(success=True, message="Logged out"))
    response.delete_cookie(ACCESS_COOKIE, path='/')
    response.delete_cookie(REFRESH_COOKIE, path='/')
    return response


@router.get("/me", response=UserDTO, auth=None)
def get_me(request: HttpRequest):
    if not request.user.is_authenticated:
        raise HttpError(401, "Authentication required")
    return to_user_dto(request.user)
