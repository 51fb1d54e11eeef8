# storefront/api/cart.py
# Cart endpoints; all of them require a Bearer token.
from fastapi import APIRouter, Depends, status

from storefront.core.context import AppContext
from storefront.core.security import get_context, get_current_user
from storefront.schemas import AuthUser, CartAddRequest, CartUpdateRequest
from storefront.services import cart

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("")
def get_cart(current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return {"items": cart.list_cart(ctx, current_user.id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_cart(body: CartAddRequest, current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return {"item": cart.add_item(ctx, current_user.id, body.product_id, body.quantity)}


@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    body: CartUpdateRequest,
    current_user: AuthUser = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    return {"item": cart.update_item(ctx, current_user.id, item_id, body.quantity)}


@router.delete("/{item_id}")
def remove_cart_item(item_id: int, current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    cart.remove_item(ctx, current_user.id, item_id)
    return {"success": True}


@router.delete("")
def clear_cart(current_user: AuthUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    cart.clear_cart(ctx, current_user.id)
    return {"success": True}
