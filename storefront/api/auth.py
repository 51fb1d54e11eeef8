# storefront/api/auth.py
# Signup, login (JWT) and the current user's profile.
from fastapi import APIRouter, Depends, status

from storefront.core.context import AppContext
from storefront.core.security import get_context, get_current_user
from storefront.schemas import AuthUser, LoginRequest, SignupRequest
from storefront.services import users

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, ctx: AppContext = Depends(get_context)):
    user = users.signup(ctx, body.email, body.password, body.name)
    return {"token": users.issue_token(ctx, user), "user": user}


@router.post("/login")
def login(body: LoginRequest, ctx: AppContext = Depends(get_context)):
    user = users.authenticate(ctx, body.email, body.password)
    return {"token": users.issue_token(ctx, user), "user": user}


@router.get("/me")
def me(current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return {"user": users.get_user(ctx, current_user.id)}
