# storefront/api/products.py
# Catalog and product reviews.
from typing import Optional

from fastapi import APIRouter, Depends, status

from storefront.core.context import AppContext
from storefront.core.security import get_context, get_current_user
from storefront.schemas import AuthUser, ReviewCreateRequest
from storefront.services import catalog, reviews

router = APIRouter()


@router.get("")
def list_products(category: Optional[str] = None, search: Optional[str] = None, ctx: AppContext = Depends(get_context)):
    return {"products": catalog.list_products(ctx, category, search)}


@router.get("/{product_id}")
def get_product(product_id: int, ctx: AppContext = Depends(get_context)):
    return {"product": catalog.get_product(ctx, product_id)}


@router.get("/{product_id}/reviews")
def list_reviews(product_id: int, ctx: AppContext = Depends(get_context)):
    return {"reviews": reviews.list_product_reviews(ctx, product_id)}


@router.post("/{product_id}/reviews", status_code=status.HTTP_201_CREATED)
def create_review(
    product_id: int,
    body: ReviewCreateRequest,
    current_user: AuthUser = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    review = reviews.submit_review(ctx, product_id, current_user, body.rating, body.content, body.image_urls)
    return {"review": review}
