# storefront/core/security.py
# Password hashing, JWT issue/verify and FastAPI dependencies for the current user and context.
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from storefront.core.context import AppContext
from storefront.schemas import AuthUser

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_password_hash(password: str) -> str:
    """Salted bcrypt hash for storage."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: AuthUser, secret_key: str, algorithm: str, expires_delta: timedelta) -> str:
    """JWT with sub = user id plus the email and display name used by reviews and order messages."""
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str) -> AuthUser:
    payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    return AuthUser(id=int(payload["sub"]), email=payload["email"], name=payload["name"])


def get_context(request: Request) -> AppContext:
    """Dependency: the application context created in the lifespan handler."""
    return request.app.state.ctx


def get_current_user(token: str | None = Depends(oauth2_scheme), ctx: AppContext = Depends(get_context)) -> AuthUser:
    """Returns the user from the Bearer token or raises 401."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(token, ctx.settings.SECRET_KEY, ctx.settings.ALGORITHM)
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired", headers={"WWW-Authenticate": "Bearer"})
    except (JWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})
