# storefront/services/users.py
# Signup, login and profile lookup.
import logging
import re
from datetime import timedelta

from storefront.core import security
from storefront.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from storefront.schemas import AuthUser, UserPublic

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def signup(ctx, email: str | None, password: str | None, name: str | None) -> AuthUser:
    if not email or not password or not name:
        raise BadRequestError("Email, password and name are required")
    if not EMAIL_RE.match(email):
        raise BadRequestError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    existing = ctx.db.execute("SELECT id FROM users WHERE email = ?", [email])
    if existing:
        raise ConflictError("Email is already registered")

    result = ctx.db.execute(
        "INSERT INTO users (email, password_hash, name) VALUES (?, ?, ?)",
        [email, security.get_password_hash(password), name],
    )
    logger.info(f"[Auth] User #{result['insert_id']} signed up")
    return AuthUser(id=result["insert_id"], email=email, name=name)


def authenticate(ctx, email: str | None, password: str | None) -> AuthUser:
    if not email or not password:
        raise BadRequestError("Email and password are required")
    users = ctx.db.execute("SELECT * FROM users WHERE email = ?", [email])
    if not users or not security.verify_password(password, users[0]["password_hash"]):
        raise AuthenticationError("Email or password does not match")
    user = users[0]
    return AuthUser(id=user["id"], email=user["email"], name=user["name"])


def get_user(ctx, user_id: int) -> UserPublic:
    users = ctx.db.execute("SELECT id, email, name, created_at FROM users WHERE id = ?", [user_id])
    if not users:
        raise NotFoundError("User not found")
    return UserPublic.model_validate(users[0])


def issue_token(ctx, user: AuthUser) -> str:
    settings = ctx.settings
    return security.create_access_token(
        user,
        settings.SECRET_KEY,
        settings.ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
