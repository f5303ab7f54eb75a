from fastapi import APIRouter, Depends, Request, Response

from config import AUTH_COOKIE_NAME, SESSION_DURATION_HOURS, IS_PRODUCTION
from models import User
from schemas.auth import SignupInput, LoginInput, AuthResponse, MeResponse
from services.auth import AuthService, get_token_from_request, to_user_dto
from services.dependencies import get_auth_service, get_current_user

router = APIRouter(prefix="/api", tags=["auth"])


def set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
        max_age=SESSION_DURATION_HOURS * 60 * 60,
        path="/",
    )


@router.post("/auth/signup", response_model=AuthResponse)
async def signup(input: SignupInput, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    """Create a new user account"""
    user, token = auth_service.signup(input.email, input.password, input.name)
    set_auth_cookie(response, token)
    return {"user": to_user_dto(user), "token": token}


@router.post("/auth/login", response_model=AuthResponse)
async def login(input: LoginInput, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    """Log in to existing account"""
    user, token = auth_service.login(input.email, input.password)
    set_auth_cookie(response, token)
    return {"user": to_user_dto(user), "token": token}


@router.post("/auth/logout")
async def logout(request: Request, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    """Log out (delete session)"""
    auth_service.logout(get_token_from_request(request))
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return {"success": True, "message": "Logged out"}


@router.get("/auth/me", response_model=MeResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current user info"""
    return {"user": to_user_dto(user)}


@router.post("/auth/refresh", response_model=AuthResponse)
async def refresh(response: Response, user: User = Depends(get_current_user),
                  auth_service: AuthService = Depends(get_auth_service)):
    """Replace every session of the current user with a fresh one"""
    token = auth_service.refresh_session(user.id)
    set_auth_cookie(response, token)
    return {"user": to_user_dto(user), "token": token}
