"""Authentication service: session tokens, identity resolution and the role/ownership gate."""
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import JWT_SECRET_KEY, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, SESSION_COOKIE_NAME
from app.database import get_db
from app.errors import Conflict, Forbidden, Unauthenticated
from app.models import UserProfile, UserType
from .models import SignupRequest, TokenData

logger = logging.getLogger(__name__)


def decode_token(token: str) -> Optional[TokenData]:
    """Decode a session token. Invalid or expired tokens yield None."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        return None
    return TokenData(user_id=user_id, user_type=payload.get("user_type"))


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def resolve_identity(request: Request, body_user_id: Optional[str] = None) -> Optional[str]:
    """Resolve the caller's user id.

    Tries the bearer header, then the session cookie, then the ``userId``
    supplied in the request body (only routes that accept it pass one).
    """
    for token in (_bearer_token(request), request.cookies.get(SESSION_COOKIE_NAME)):
        if not token:
            continue
        data = decode_token(token)
        if data is not None:
            return data.user_id
    if body_user_id:
        return body_user_id
    return None


class IdentityResolver:
    """FastAPI dependency returning the caller id from the header or cookie."""

    def __init__(self, required: bool = True):
        self.required = required

    def __call__(self, request: Request) -> Optional[str]:
        user_id = resolve_identity(request)
        if user_id is None and self.required:
            raise Unauthenticated()
        return user_id


get_current_user_id = IdentityResolver()
get_optional_user_id = IdentityResolver(required=False)


def require_role(db: Session, user_id: str, role: UserType, message: Optional[str] = None) -> UserProfile:
    """Load the caller's profile and check its user type."""
    profile = db.get(UserProfile, user_id)
    if profile is None or profile.user_type != role:
        raise Forbidden(message or f"Only {role.value}s can perform this action")
    return profile


def require_owner(owner_id: str, user_id: str, message: str = "You do not have permission to modify this resource") -> None:
    if owner_id != user_id:
        logger.warning(f"Ownership mismatch: user {user_id} acted on a resource owned by {owner_id}")
        raise Forbidden(message)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a new access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(UTC) + expires_delta
        else:
            expire = datetime.now(UTC) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)

    def issue_token(self, user: UserProfile) -> str:
        return self.create_access_token({"sub": user.id, "user_type": user.user_type.value})

    def authenticate_user(self, email: str, password: str) -> Optional[UserProfile]:
        """Authenticate a user with email and password."""
        user = self.db.query(UserProfile).filter(UserProfile.email == email.lower()).first()
        if not user or not user.verify_password(password):
            return None
        return user

    def register_user(self, user_data: SignupRequest) -> UserProfile:
        """Register a new user."""
        email = user_data.email.lower()
        if self.db.query(UserProfile).filter(UserProfile.email == email).first():
            raise Conflict("Email already registered")

        user = UserProfile(
            email=email,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            user_type=user_data.user_type,
        )
        user.set_password(user_data.password)

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered {user.user_type.value} {user.id}")
        return user

    def upsert_sso_user(
        self,
        email: str,
        clever_id: str,
        user_type: UserType,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> UserProfile:
        """Create or update the profile behind a Clever login, keyed by email."""
        email = email.lower()
        user = self.db.query(UserProfile).filter(UserProfile.email == email).first()
        if user is None:
            user = UserProfile(email=email, user_type=user_type)
            self.db.add(user)
        user.clever_id = clever_id
        user.user_type = user_type
        user.first_name = first_name or user.first_name
        user.last_name = last_name or user.last_name
        self.db.commit()
        self.db.refresh(user)
        return user


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> UserProfile:
    """Dependency to get the current user's profile."""
    user = db.get(UserProfile, user_id)
    if user is None:
        raise Unauthenticated()
    return user
