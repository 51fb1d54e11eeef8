# storefront/api/orders.py
# Checkout and order history.
from fastapi import APIRouter, Depends, status

from storefront.core.context import AppContext
from storefront.core.security import get_context, get_current_user
from storefront.schemas import AuthUser
from storefront.services import orders

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def place_order(current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return {"order": orders.place_order(ctx, current_user)}


@router.get("")
def list_orders(current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return {"orders": orders.list_orders(ctx, current_user.id)}
