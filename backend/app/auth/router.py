"""Authentication router for handling user authentication endpoints."""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
import requests

from app import config
from app.database import get_db
from app.errors import InvalidInput, Unauthenticated, UpstreamError
from app.models import UserProfile, UserType
from app.responses import ok
from app.schemas import ProfileOut, dump
from .models import CleverLoginRequest, SignupRequest, Token
from .service import AuthService, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get an instance of AuthService."""
    return AuthService(db)


def _session_response(service: AuthService, user: UserProfile, status_code: int = status.HTTP_200_OK):
    access_token = service.issue_token(user)
    token = Token(access_token=access_token)
    response = ok({**token.model_dump(), "user": dump(ProfileOut, user)}, status_code=status_code)
    response.set_cookie(
        config.SESSION_COOKIE_NAME,
        access_token,
        httponly=True,
        samesite="lax",
        max_age=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return response


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new teacher or student account and open a session."""
    user = service.register_user(user_data)
    return _session_response(service, user, status_code=status.HTTP_201_CREATED)


@router.post("/login")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    """OAuth2 compatible token login. Also sets the session cookie."""
    user = service.authenticate_user(form_data.username, form_data.password)
    if not user:
        raise Unauthenticated("Incorrect email or password")
    return _session_response(service, user)


@router.post("/logout")
async def logout():
    response = ok(message="Successfully logged out")
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return response


@router.get("/me")
async def read_users_me(current_user: UserProfile = Depends(get_current_user)):
    """Get the current user's profile."""
    return ok(dump(ProfileOut, current_user))


# --- Clever SSO ---

CLEVER_TOKEN_URL = "https://clever.com/oauth/tokens"
CLEVER_API_URL = "https://api.clever.com/v3.0"


def _clever_oauth_config():
    client_id = config.CLEVER_CLIENT_ID
    client_secret = config.CLEVER_CLIENT_SECRET
    if not client_id or not client_secret:
        raise UpstreamError("Clever SSO not configured")
    redirect_uri = f"{config.APP_URL}/auth/clever/callback"
    return client_id, client_secret, redirect_uri


@router.post("/clever")
async def clever_login(
    payload: CleverLoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange a Clever authorization code, upsert the profile, issue a session."""
    if not payload.code:
        raise InvalidInput("Authorization code is required")
    client_id, client_secret, redirect_uri = _clever_oauth_config()

    token_resp = requests.post(
        CLEVER_TOKEN_URL,
        json={
            "code": payload.code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        },
        auth=(client_id, client_secret),
        timeout=10,
    )
    if token_resp.status_code != 200:
        logger.warning(f"Clever token exchange failed with status {token_resp.status_code}")
        raise InvalidInput("Failed to exchange code for tokens")
    access_token = token_resp.json().get("access_token")
    if not access_token:
        raise InvalidInput("No access token returned by provider")

    headers = {"Authorization": f"Bearer {access_token}"}
    me_resp = requests.get(f"{CLEVER_API_URL}/me", headers=headers, timeout=10)
    if me_resp.status_code != 200:
        raise InvalidInput("Failed to fetch Clever identity")
    me = me_resp.json().get("data") or {}
    clever_id = me.get("id")
    if not clever_id:
        raise InvalidInput("Failed to fetch Clever identity")

    user_resp = requests.get(f"{CLEVER_API_URL}/users/{clever_id}", headers=headers, timeout=10)
    if user_resp.status_code != 200:
        raise InvalidInput("Failed to fetch Clever user info")
    info = user_resp.json().get("data") or {}
    email = info.get("email")
    if not email:
        raise InvalidInput("Email not provided by Clever")
    name = info.get("name") or {}

    user_type = UserType.teacher if me.get("type") == "teacher" else UserType.student
    user = service.upsert_sso_user(
        email=email,
        clever_id=clever_id,
        user_type=user_type,
        first_name=name.get("first"),
        last_name=name.get("last"),
    )
    logger.info(f"Clever login for {user_type.value} {user.id}")
    return _session_response(service, user)
