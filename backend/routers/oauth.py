import hmac
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from config import APP_BASE_URL, IS_PRODUCTION, OAUTH_COOKIE_MAX_AGE
from routers.auth import set_auth_cookie
from services.dependencies import get_oauth_factory, get_oauth_user_service
from services.errors import AppError, OAuthError, ValidationError
from services.oauth import OAuthStrategyFactory, OAuthUserService
from services.oauth.cookies import state_cookie_name, verifier_cookie_name, sign_value, unsign_value

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth/oauth", tags=["oauth"])

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


def _login_error_redirect(error: str) -> RedirectResponse:
    # 303 so Apple's form_post callback turns into a GET
    return RedirectResponse(f"{APP_BASE_URL}{LOGIN_PATH}?{urlencode({'error': error})}", status_code=303)


def _set_oauth_cookie(response, provider: str, name: str, value: str):
    # Apple returns with a cross-site form POST, which drops SameSite=Lax cookies
    cross_site = provider == "apple" and IS_PRODUCTION
    response.set_cookie(
        key=name,
        value=sign_value(value),
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="none" if cross_site else "lax",
        max_age=OAUTH_COOKIE_MAX_AGE,
        path="/",
    )


def _clear_oauth_cookies(response, provider: str):
    response.delete_cookie(state_cookie_name(provider), path="/")
    response.delete_cookie(verifier_cookie_name(provider), path="/")


@router.get("/{provider}")
async def start_oauth(provider: str, factory: OAuthStrategyFactory = Depends(get_oauth_factory)):
    """Redirect the browser to the provider's consent screen"""
    if not factory.is_supported(provider):
        raise ValidationError("Invalid provider")

    try:
        authorization = factory.create(provider).get_authorization_url()
    except RuntimeError as e:
        logger.error("OAuth initiation failed for %s: %s", provider, e)
        raise AppError(str(e), 500)

    response = RedirectResponse(authorization.url)
    _set_oauth_cookie(response, provider, state_cookie_name(provider), authorization.state)
    _set_oauth_cookie(response, provider, verifier_cookie_name(provider), authorization.code_verifier)
    return response


async def handle_oauth_callback(request: Request, provider: str, code: Optional[str], state: Optional[str],
                                error: Optional[str], factory: OAuthStrategyFactory,
                                user_service: OAuthUserService) -> RedirectResponse:
    if not factory.is_supported(provider):
        return _login_error_redirect("invalid_provider")
    if error:
        return _login_error_redirect(error)
    if not code or not state:
        return _login_error_redirect("missing_code_or_state")

    stored_state = unsign_value(request.cookies.get(state_cookie_name(provider)))
    code_verifier = unsign_value(request.cookies.get(verifier_cookie_name(provider)))

    if not stored_state or not hmac.compare_digest(stored_state.encode(), state.encode()):
        logger.warning("OAuth state mismatch for %s", provider)
        response = _login_error_redirect("invalid_state")
        _clear_oauth_cookies(response, provider)
        return response

    try:
        strategy = factory.create(provider)
        tokens, user_info = await strategy.authenticate(code, code_verifier)
        user, token = user_service.find_or_create_user(provider, user_info, tokens)
    except OAuthError as e:
        logger.error("OAuth callback failed for %s: %s", provider, e)
        response = _login_error_redirect(e.error_code)
        _clear_oauth_cookies(response, provider)
        return response
    except Exception:
        logger.exception("Unexpected OAuth callback error for %s", provider)
        response = _login_error_redirect("oauth_failed")
        _clear_oauth_cookies(response, provider)
        return response

    response = RedirectResponse(f"{APP_BASE_URL}{DASHBOARD_PATH}", status_code=303)
    _clear_oauth_cookies(response, provider)
    set_auth_cookie(response, token)
    logger.info("User %s signed in with %s", user.id, provider)
    return response


@router.get("/{provider}/callback")
async def oauth_callback(provider: str, request: Request,
                         code: Optional[str] = None, state: Optional[str] = None, error: Optional[str] = None,
                         factory: OAuthStrategyFactory = Depends(get_oauth_factory),
                         user_service: OAuthUserService = Depends(get_oauth_user_service)):
    return await handle_oauth_callback(request, provider, code, state, error, factory, user_service)


@router.post("/{provider}/callback")
async def oauth_callback_form_post(provider: str, request: Request,
                                   factory: OAuthStrategyFactory = Depends(get_oauth_factory),
                                   user_service: OAuthUserService = Depends(get_oauth_user_service)):
    """Apple posts the authorization response as a form"""
    if provider != "apple":
        raise ValidationError("POST only supported for Apple")

    form = await request.form()
    return await handle_oauth_callback(
        request, provider, form.get("code"), form.get("state"), form.get("error"), factory, user_service
    )
